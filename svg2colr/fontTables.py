"""Assemble the TTX description of the color font and compile it with fontTools."""

import logging
import xml.etree.ElementTree as ET

from fontTools import version as fontToolsVersion
from fontTools.misc.timeTools import timestampNow, timestampToString
from fontTools.ttLib import TTFont

from .colorTools import isCanonicalColor
from .errors import CompilerError, Svg2ColrError


logger = logging.getLogger(__name__)

NOTDEF = ".notdef"
NULL_UNICODE = "0"
FALLBACK_COLOR = "#000000ff"

_zeroRange = "00000000 00000000 00000000 00000000"

_panose = [
    ("bFamilyType", 2),
    ("bSerifStyle", 0),
    ("bWeight", 5),
    ("bProportion", 9),
    ("bContrast", 0),
    ("bStrokeVariation", 0),
    ("bArmStyle", 0),
    ("bLetterForm", 0),
    ("bMidline", 0),
    ("bXHeight", 0),
]

_maxp = [
    ("tableVersion", "0x10000"),
    ("maxZones", 2),
    ("maxTwilightPoints", 0),
    ("maxStorage", 1),
    ("maxFunctionDefs", 1),
    ("maxInstructionDefs", 0),
    ("maxStackElements", 64),
    ("maxSizeOfInstructions", 0),
]

_post = [
    ("formatType", "2.0"),
    ("italicAngle", "0.0"),
    ("underlinePosition", 0),
    ("underlineThickness", 0),
    ("isFixedPitch", 1),
    ("minMemType42", 0),
    ("maxMemType42", 0),
    ("minMemType1", 0),
    ("maxMemType1", 0),
]


def _values(parent, tag, fields):
    table = ET.SubElement(parent, tag)
    for name, value in fields:
        ET.SubElement(table, name, value=str(value))
    return table


def _nameText(info, value):
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return _nameText(info, info[str(value)])
    if isinstance(value, list):
        return "".join(_nameText(info, part) for part in value)
    raise Svg2ColrError(f"invalid name text {value!r}")


def nameRecords(info):
    """Yield ``(nameID, text)`` for every numbered entry of the font info."""
    for key in ("1", "version", "fontName"):
        if key not in info:
            raise Svg2ColrError(f"font info is missing {key!r}")
    info = dict(info)
    info["3"] = "%s %s" % (info["1"], info["version"])
    info["5"] = "Version %s" % info["version"]
    info["6"] = info["fontName"]
    ids = sorted(int(key) for key in info if key.isdigit() and int(key) > 0)
    for nameID in ids:
        yield nameID, _nameText(info, info[str(nameID)])


def paletteColors(colors):
    for color in colors:
        if not isCanonicalColor(color):
            logger.warning("unexpected color: %s", color)
            color = FALLBACK_COLOR
        yield color


def _name(ttFont, info):
    name = ET.SubElement(ttFont, "name")
    for nameID, text in nameRecords(info):
        for platformID, platEncID, langID in (("0", "0", "0x0"), ("1", "0", "0x0"), ("3", "1", "0x0409")):
            record = ET.SubElement(
                name,
                "namerecord",
                nameID=str(nameID),
                platformID=platformID,
                platEncID=platEncID,
                langID=langID,
            )
            record.text = text


def _head(ttFont, config):
    now = timestampToString(timestampNow())
    upm = config.unitsPerEm
    _values(
        ttFont,
        "head",
        [
            ("tableVersion", "1.0"),
            ("fontRevision", "1.0"),
            ("checkSumAdjustment", "0x0"),
            ("magicNumber", "0x5f0f3cf5"),
            ("flags", "00000000 00001011"),
            ("unitsPerEm", upm),
            ("created", now),
            ("modified", now),
            ("xMin", 0),
            ("yMin", 0),
            ("xMax", upm),
            ("yMax", upm),
            ("macStyle", "00000000 00000000"),
            ("lowestRecPPEM", 16),
            ("fontDirectionHint", 0),
            ("indexToLocFormat", 0),
            ("glyphDataFormat", 0),
        ],
    )


def _hhea(ttFont, config):
    _values(
        ttFont,
        "hhea",
        [
            ("tableVersion", "0x00010000"),
            ("ascent", config.ascent),
            ("descent", config.descent),
            ("lineGap", config.lineGap),
            ("advanceWidthMax", config.advanceWidth),
            ("minLeftSideBearing", 0),
            ("minRightSideBearing", 0),
            ("xMaxExtent", config.advanceWidth),
            ("caretSlopeRise", 1),
            ("caretSlopeRun", 0),
            ("caretOffset", 0),
            ("reserved0", 0),
            ("reserved1", 0),
            ("reserved2", 0),
            ("reserved3", 0),
            ("metricDataFormat", 0),
            ("numberOfHMetrics", 1),
        ],
    )


def _os2(ttFont, config, vendor):
    upm = config.unitsPerEm
    os2 = _values(
        ttFont,
        "OS_2",
        [
            ("version", 4),
            ("xAvgCharWidth", config.advanceWidth),
            ("usWeightClass", 400),
            ("usWidthClass", 5),
            ("fsType", "00000000 00000000"),
            ("ySubscriptXSize", upm),
            ("ySubscriptYSize", upm),
            ("ySubscriptXOffset", 0),
            ("ySubscriptYOffset", 0),
            ("ySuperscriptXSize", upm),
            ("ySuperscriptYSize", upm),
            ("ySuperscriptXOffset", 0),
            ("ySuperscriptYOffset", 0),
            ("yStrikeoutSize", 5),
            ("yStrikeoutPosition", 251),
            ("sFamilyClass", 0),
        ],
    )
    _values(os2, "panose", _panose)
    for name, value in [
        ("ulUnicodeRange1", _zeroRange),
        ("ulUnicodeRange2", _zeroRange),
        ("ulUnicodeRange3", _zeroRange),
        ("ulUnicodeRange4", _zeroRange),
        ("achVendID", vendor),
        ("fsSelection", "00000000 01000000"),
        ("sTypoAscender", upm),
        ("sTypoDescender", 0),
        ("sTypoLineGap", config.lineGap),
        ("usWinAscent", config.ascent),
        ("usWinDescent", -config.descent),
        ("ulCodePageRange1", _zeroRange),
        ("ulCodePageRange2", _zeroRange),
        ("sxHeight", 0),
        ("sCapHeight", 0),
        ("usDefaultChar", 0),
        ("usBreakChar", "0x0"),
        ("usMaxContext", 0),
    ]:
        ET.SubElement(os2, name, value=str(value))


def buildTtx(fontData):
    """Return the TTX tree describing the whole font."""
    config = fontData.config
    characters = fontData.characters
    components = fontData.components.components
    glyphNames = [NOTDEF] + [ch.name for ch in characters] + [c.name for c in components]

    ttFont = ET.Element("ttFont", sfntVersion="\\x00\\x01\\x00\\x00", ttLibVersion=fontToolsVersion)

    _name(ttFont, fontData.info)

    glyphOrder = ET.SubElement(ttFont, "GlyphOrder")
    for glyphID, glyphName in enumerate(glyphNames):
        ET.SubElement(glyphOrder, "GlyphID", id=str(glyphID), name=glyphName)

    _head(ttFont, config)
    _hhea(ttFont, config)
    _values(ttFont, "maxp", _maxp)
    _os2(ttFont, config, fontData.info.get("vendor", "NONE"))

    # calculated by the compiler
    ET.SubElement(ttFont, "loca")

    hmtx = ET.SubElement(ttFont, "hmtx")
    advance = str(config.advanceWidth)
    for glyphName in [NOTDEF] + [ch.name for ch in characters]:
        ET.SubElement(hmtx, "mtx", name=glyphName, width=advance, lsb="0")
    for component in components:
        ET.SubElement(hmtx, "mtx", name=component.name, width=advance, lsb=str(component.lsb))

    cmap = ET.SubElement(ttFont, "cmap")
    ET.SubElement(cmap, "tableVersion", version="0")
    format12 = ET.SubElement(
        cmap,
        "cmap_format_12",
        platformID="0",
        platEncID="4",
        language="0",
        format="12",
        reserved="0",
        length=str(len(characters) * 12),
        nGroups=str(len(characters)),
    )
    for ch in characters:
        ET.SubElement(format12, "map", code="0x" + ch.unicode, name=ch.name)

    glyf = ET.SubElement(ttFont, "glyf")
    for glyphName in [NOTDEF] + [ch.name for ch in characters]:
        ET.SubElement(glyf, "TTGlyph", name=glyphName)
    for component in components:
        glyf.append(component.glyph)

    post = _values(ttFont, "post", _post)
    ET.SubElement(post, "psNames")
    extraNames = ET.SubElement(post, "extraNames")
    for ch in characters:
        if ch.unicode != NULL_UNICODE:
            ET.SubElement(extraNames, "psName", name=ch.name)
    for component in components:
        ET.SubElement(extraNames, "psName", name=component.name)

    gasp = ET.SubElement(ttFont, "gasp")
    ET.SubElement(gasp, "gaspRange", rangeMaxPPEM="65535", rangeGaspBehavior="2")

    # COLR lists the color layers making up each character, bottom to top
    colr = ET.SubElement(ttFont, "COLR")
    ET.SubElement(colr, "version", value="0")
    for ch in characters:
        if ch.unicode == NULL_UNICODE:
            continue
        colorGlyph = ET.SubElement(colr, "ColorGlyph", name=ch.name)
        for color, componentName in ch.layers:
            ET.SubElement(
                colorGlyph, "layer", colorID=str(fontData.palette.colorId(color)), name=componentName
            )

    # CPAL maps color indices to RGBA colors
    colors = list(paletteColors(fontData.palette.colors))
    cpal = ET.SubElement(ttFont, "CPAL")
    ET.SubElement(cpal, "version", value="0")
    ET.SubElement(cpal, "numPaletteEntries", value=str(len(colors)))
    palette = ET.SubElement(cpal, "palette", index="0")
    for index, color in enumerate(colors):
        ET.SubElement(palette, "color", index=str(index), value=color)

    gdef = ET.SubElement(ttFont, "GDEF")
    ET.SubElement(gdef, "Version", value="0x00010000")
    classDef = ET.SubElement(gdef, "GlyphClassDef", Format="2")
    for glyphName in glyphNames[1:]:
        ET.SubElement(classDef, "ClassDef", glyph=glyphName, **{"class": "1"})

    tree = ET.ElementTree(ttFont)
    ET.indent(tree)
    return tree


def writeTtx(tree, path):
    tree.write(path, encoding="UTF-8", xml_declaration=True)


def compileTtx(ttxPath, ttfPath):
    """Compile a TTX file into a binary font."""
    try:
        font = TTFont(recalcBBoxes=True, recalcTimestamp=True)
        font.importXML(ttxPath)
        font.save(ttfPath)
    except Exception as e:
        raise CompilerError(f"could not compile {ttxPath}: {e}") from e
    logger.info("wrote %s", ttfPath)
    return ttfPath
