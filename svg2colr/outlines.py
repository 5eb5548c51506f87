"""Outline compilers turn one single-color layer of SVG markup into a glyph.

Both compilers produce a small TrueType font holding the outlines under a
placeholder name; the glyph is then lifted out of that font as TTX and
renamed to the component name.
"""

import io
import logging
import subprocess
import xml.etree.ElementTree as ET

import pathops
from fontTools.fontBuilder import FontBuilder
from fontTools.misc.transform import Identity
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.filterPen import FilterPen
from fontTools.pens.transformPen import TransformPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.svgLib.path import parse_path
from fontTools.ttLib import TTFont
from pathops import union
from ufoLib2.objects import Glyph

from .config import BuildConfig
from .errors import CompilerError, Svg2ColrError
from .svgScene import kindFromTag, parseLength, shapePathData
from .transformTools import parseTransform


logger = logging.getLogger(__name__)

PLACEHOLDER = "uni0000"

_lineCaps = {
    "butt": pathops.LineCap.BUTT_CAP,
    "round": pathops.LineCap.ROUND_CAP,
    "square": pathops.LineCap.SQUARE_CAP,
}

_lineJoins = {
    "miter": pathops.LineJoin.MITER_JOIN,
    "round": pathops.LineJoin.ROUND_JOIN,
    "bevel": pathops.LineJoin.BEVEL_JOIN,
}


def componentFromFont(font, placeholder, name):
    """Return the TTX ``TTGlyph`` element of ``placeholder`` renamed to ``name``, and its lsb."""
    buf = io.BytesIO()
    font.saveXML(buf, tables=["glyf"])
    root = ET.fromstring(buf.getvalue())
    for ttGlyph in root.iter("TTGlyph"):
        if ttGlyph.get("name") == placeholder:
            break
    else:
        raise CompilerError(f"compiled outline has no glyph {placeholder!r}")
    ttGlyph.set("name", name)
    ttGlyph.tail = None
    return ttGlyph, font["hmtx"][placeholder][1]


def runTool(command):
    logger.debug("running %s", command[0])
    try:
        proc = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise CompilerError(f"could not run {command[0]}: {e}", command) from e
    if proc.returncode != 0:
        raise CompilerError(
            f"{command[0]} exited with code {proc.returncode}", command, proc.stderr
        )
    return proc


class _ClosingPen(FilterPen):
    def endPath(self):
        self._outPen.closePath()


class OutlineCompiler:
    placeholder = PLACEHOLDER

    def __init__(self, config=None):
        self.config = config or BuildConfig()

    def compile(self, markup, name):
        raise NotImplementedError


class PenOutlineCompiler(OutlineCompiler):
    """Compile layers in-process with fontTools pens and skia-pathops."""

    def compile(self, markup, name):
        try:
            root = ET.fromstring(markup)
            viewTransform = self.viewTransform(root.attrib)
            paths = []
            for element in root:
                path = self.elementPath(element)
                if path is None:
                    continue
                transformed = pathops.Path()
                transform = viewTransform.transform(parseTransform(element.get("transform")))
                path.draw(TransformPen(transformed.getPen(), transform))
                paths.append(transformed)

            glyph = Glyph(name=self.placeholder)
            union(paths, glyph.getPen())
            ttPen = TTGlyphPen(None)
            glyph.draw(Cu2QuPen(ttPen, self.config.maxCurveError, reverse_direction=True))
            font = self.buildFont(ttPen.glyph())
        except (ET.ParseError, ValueError, pathops.PathOpsError) as e:
            raise CompilerError(f"could not compile outlines for {name}: {e}") from e
        return componentFromFont(font, self.placeholder, name)

    def viewTransform(self, rootAttrib):
        """Map the SVG canvas onto the em, y up, baseline shifted down."""
        upm = self.config.unitsPerEm
        viewBox = rootAttrib.get("viewBox")
        if viewBox:
            x, y, width, height = (float(v) for v in viewBox.replace(",", " ").split())
        else:
            x = y = 0.0
            width = parseLength(rootAttrib.get("width"), upm)
            height = parseLength(rootAttrib.get("height"), upm)
        scale = upm / height if height else 1.0
        return (
            Identity.translate(0, upm - self.config.baselineShift)
            .scale(scale, -scale)
            .translate(-x, -y)
        )

    def elementPath(self, element):
        d = shapePathData(kindFromTag(element.tag), element.attrib)
        if not d:
            return None
        path = pathops.Path()
        stroked = element.get("stroke", "none") != "none"
        if stroked:
            width = parseLength(element.get("stroke-width"), 1.0)
            if width <= 0:
                return None
            parse_path(d, path.getPen())
            path.stroke(
                width,
                _lineCaps.get(element.get("stroke-linecap"), pathops.LineCap.BUTT_CAP),
                _lineJoins.get(element.get("stroke-linejoin"), pathops.LineJoin.MITER_JOIN),
                parseLength(element.get("stroke-miterlimit"), 4.0),
            )
        else:
            parse_path(d, _ClosingPen(path.getPen()))
            if element.get("fill-rule") == "evenodd":
                path.fillType = pathops.FillType.EVEN_ODD
                path.simplify()
        return path

    def buildFont(self, glyph):
        advance = self.config.advanceWidth
        fb = FontBuilder(self.config.unitsPerEm, isTTF=True)
        fb.setupGlyphOrder([".notdef", self.placeholder])
        fb.setupCharacterMap({0: self.placeholder})
        fb.setupGlyf({".notdef": TTGlyphPen(None).glyph(), self.placeholder: glyph})
        fb.setupHorizontalMetrics(
            {".notdef": (advance, 0), self.placeholder: (advance, getattr(glyph, "xMin", 0))}
        )
        fb.setupHorizontalHeader(ascent=self.config.unitsPerEm, descent=0)
        return fb.font


_fontforgeScript = """\
import fontforge
import psMat

font = fontforge.font()
font.ascent = {unitsPerEm}
font.descent = 0

glyph = font.createChar(0)
glyph.importOutlines({svgPath!r})
glyph.correctDirection()
glyph.transform(psMat.translate(0.0, {shift}))

font.generate({ttfPath!r})
"""


class FontforgeOutlineCompiler(OutlineCompiler):
    """Compile layers by importing them into FontForge."""

    def __init__(self, buildDir, config=None, executable="fontforge"):
        super().__init__(config)
        self.buildDir = buildDir
        self.executable = executable

    def compile(self, markup, name):
        svgPath = self.buildDir / "glyph.svg"
        ttfPath = self.buildDir / "glyph.ttf"
        svgPath.write_text(markup, encoding="utf-8")
        script = _fontforgeScript.format(
            unitsPerEm=self.config.unitsPerEm,
            svgPath=str(svgPath),
            shift=-float(self.config.baselineShift),
            ttfPath=str(ttfPath),
        )
        runTool([self.executable, "-quiet", "-lang=py", "-c", script])
        with TTFont(ttfPath) as font:
            return componentFromFont(font, self.placeholder, name)


def outlineCompiler(kind, buildDir, config=None):
    if kind == "pens":
        return PenOutlineCompiler(config)
    if kind == "fontforge":
        return FontforgeOutlineCompiler(buildDir, config)
    raise Svg2ColrError(f"unknown outline compiler {kind!r}")
