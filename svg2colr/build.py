import logging
import pathlib
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .components import ComponentCache, Palette, componentName
from .config import BuildConfig, configFromInfo, loadInfo
from .decompose import ShapeDecomposer
from .errors import Svg2ColrError
from .fontTables import NULL_UNICODE, buildTtx, compileTtx, writeTtx
from .layers import layerMarkup, mergeSublayers
from .outlines import outlineCompiler
from .svgScene import parseFile


logger = logging.getLogger(__name__)

_codepoint = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(eq=False)
class Character:
    unicode: str
    name: str
    # (color, component glyph name), bottom to top
    layers: list = field(default_factory=list)


class FontData:
    """Everything accumulated while building one font."""

    def __init__(self, info, compiler, config=None):
        self.info = info
        self.config = config or BuildConfig()
        self.components = ComponentCache(compiler)
        self.palette = Palette()
        self.characters = [Character(NULL_UNICODE, ".null")]

    def addDocument(self, unicode, document, name=None):
        decomposer = ShapeDecomposer(name or unicode, self.config)
        sublayers = decomposer.decompose(document.children)
        character = Character(unicode, "u" + unicode)
        for index, layer in enumerate(mergeSublayers(sublayers)):
            key = layerMarkup(document.rootAttrib, layer)
            component, _ = self.components.lookup(key, componentName(unicode, index))
            character.layers.append((layer.color, component.name))
            self.palette.colorId(layer.color)
        self.characters.append(character)
        return character


def processFile(fontData, path):
    path = pathlib.Path(path)
    unicode = path.stem
    if not _codepoint.match(unicode):
        logger.warning("skipping %s: file name is not a hexadecimal codepoint", path.name)
        return None
    logger.info("processing %s", path.name)
    try:
        document = parseFile(path)
    except ET.ParseError as e:
        raise Svg2ColrError(f"{path.name}: {e}") from e
    return fontData.addDocument(unicode, document, path.name)


def buildFont(sourceDir, buildDir="build", compiler=None, outlineCompilerName=None):
    """Build ``<buildDir>/<fontName>.ttf`` from the SVG files in ``sourceDir``."""
    sourceDir = pathlib.Path(sourceDir)
    buildDir = pathlib.Path(buildDir)
    buildDir.mkdir(parents=True, exist_ok=True)

    info = loadInfo(sourceDir)
    config = configFromInfo(info, outlineCompiler=outlineCompilerName)
    if compiler is None:
        compiler = outlineCompiler(config.outlineCompiler, buildDir, config)

    fontData = FontData(info, compiler, config)
    for path in sorted(sourceDir.glob("*.svg")):
        processFile(fontData, path)
    logger.info(
        "%d characters, %d layer glyphs, %d colors",
        len(fontData.characters) - 1,
        len(fontData.components),
        len(fontData.palette),
    )

    ttxPath = buildDir / "out.ttx"
    writeTtx(buildTtx(fontData), ttxPath)
    return compileTtx(ttxPath, buildDir / (info["fontName"] + ".ttf"))
