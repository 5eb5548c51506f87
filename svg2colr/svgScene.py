import enum
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from .pathTools import pathBounds


SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XLINK_HREF = "{%s}href" % XLINK_NS

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


class NodeKind(enum.Enum):
    GROUP = "g"
    PATH = "path"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    RECT = "rect"
    LINE = "line"
    POLYGON = "polygon"
    POLYLINE = "polyline"
    REFERENCE = "use"
    GRADIENT = "gradient"
    DEFINITIONS = "defs"
    METADATA = "metadata"
    OTHER = "other"


_kinds = {
    "g": NodeKind.GROUP,
    "a": NodeKind.GROUP,
    "switch": NodeKind.GROUP,
    "svg": NodeKind.GROUP,
    "path": NodeKind.PATH,
    "circle": NodeKind.CIRCLE,
    "ellipse": NodeKind.ELLIPSE,
    "rect": NodeKind.RECT,
    "line": NodeKind.LINE,
    "polygon": NodeKind.POLYGON,
    "polyline": NodeKind.POLYLINE,
    "use": NodeKind.REFERENCE,
    "linearGradient": NodeKind.GRADIENT,
    "radialGradient": NodeKind.GRADIENT,
    "defs": NodeKind.DEFINITIONS,
}

# elements that never paint anything themselves
_nonRendering = {
    "metadata",
    "title",
    "desc",
    "style",
    "script",
    "clipPath",
    "mask",
    "pattern",
    "filter",
    "marker",
}

_paintAttributes = ("fill", "stroke", "stroke-width", "opacity", "transform")
_droppedAttributes = ("style", "shape-rendering")

_number = re.compile(r"\s*([-+]?(?:[0-9]*\.[0-9]+|[0-9]+\.?)(?:[eE][-+]?[0-9]+)?)")


@dataclass(frozen=True)
class PaintAttributes:
    fill: Optional[str] = None
    stroke: Optional[str] = None
    strokeWidth: Optional[str] = None
    opacity: Optional[str] = None
    transform: Optional[str] = None


@dataclass(frozen=True, eq=False)
class SceneNode:
    kind: NodeKind
    tag: str
    id: Optional[str] = None
    paint: PaintAttributes = PaintAttributes()
    # everything not covered by paint, in source order, passed on verbatim
    attrib: dict = field(default_factory=dict)
    children: tuple = ()
    stops: tuple = ()
    href: Optional[str] = None


@dataclass(frozen=True, eq=False)
class SvgDocument:
    rootAttrib: dict
    children: tuple


def localName(tag):
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _namespace(tag):
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def parseLength(value, default=0.0):
    """Leading number of an attribute value, ignoring units."""
    if value is None:
        return default
    m = _number.match(value)
    return float(m.group(1)) if m else default


def styleProperty(style, name):
    if not style:
        return None
    for declaration in style.split(";"):
        key, _, value = declaration.partition(":")
        if key.strip() == name:
            return value.strip()
    return None


def nodeKind(element):
    ns = _namespace(element.tag)
    name = localName(element.tag)
    if ns not in (None, SVG_NS) or name in _nonRendering:
        return NodeKind.METADATA
    return _kinds.get(name, NodeKind.OTHER)


def _gradientStops(element):
    stops = []
    for child in element:
        if localName(child.tag) != "stop":
            continue
        color = child.get("stop-color") or styleProperty(child.get("style"), "stop-color")
        stops.append(color or "#000")
    return tuple(stops)


def sceneNode(element):
    kind = nodeKind(element)
    values = dict(element.attrib)
    for name in _droppedAttributes:
        values.pop(name, None)
    paint = PaintAttributes(*(values.pop(name, None) for name in _paintAttributes))
    href = values.get(XLINK_HREF) or values.get("href")
    if kind in (NodeKind.REFERENCE, NodeKind.GRADIENT):
        values.pop(XLINK_HREF, None)
        values.pop("href", None)
    children = ()
    if kind in (NodeKind.GROUP, NodeKind.DEFINITIONS):
        children = tuple(sceneNode(child) for child in element)
    stops = _gradientStops(element) if kind == NodeKind.GRADIENT else ()
    return SceneNode(
        kind=kind,
        tag=element.tag,
        id=values.get("id"),
        paint=paint,
        attrib=values,
        children=children,
        stops=stops,
        href=href,
    )


def parseDocument(data):
    root = ET.fromstring(data)
    return SvgDocument(
        rootAttrib=dict(root.attrib),
        children=tuple(sceneNode(child) for child in root),
    )


def parseFile(path):
    with open(path, "rb") as f:
        return parseDocument(f.read())


def _pointList(value):
    numbers = [float(n) for n in _number.findall(value or "")]
    return list(zip(numbers[0::2], numbers[1::2]))


def nodeBounds(kind, attrib):
    """Axis aligned box (xMin, yMin, xMax, yMax) of an untransformed shape."""
    get = lambda name: parseLength(attrib.get(name))
    if kind == NodeKind.PATH:
        return pathBounds(attrib.get("d", ""))
    if kind == NodeKind.CIRCLE:
        cx, cy, r = get("cx"), get("cy"), get("r")
        return (cx - r, cy - r, cx + r, cy + r)
    if kind == NodeKind.ELLIPSE:
        cx, cy, rx, ry = get("cx"), get("cy"), get("rx"), get("ry")
        return (cx - rx, cy - ry, cx + rx, cy + ry)
    if kind == NodeKind.RECT:
        x, y = get("x"), get("y")
        return (x, y, x + get("width"), y + get("height"))
    if kind == NodeKind.LINE:
        x1, y1, x2, y2 = get("x1"), get("y1"), get("x2"), get("y2")
        return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
    if kind in (NodeKind.POLYGON, NodeKind.POLYLINE):
        points = _pointList(attrib.get("points"))
        if points:
            xs, ys = zip(*points)
            return (min(xs), min(ys), max(xs), max(ys))
    return (0.0, 0.0, 0.0, 0.0)


def kindFromTag(tag):
    return _kinds.get(localName(tag), NodeKind.OTHER)


def _ellipseData(cx, cy, rx, ry):
    return "M%s,%s A%s,%s 0 1 0 %s,%s A%s,%s 0 1 0 %s,%s Z" % (
        cx - rx, cy, rx, ry, cx + rx, cy, rx, ry, cx - rx, cy
    )


def _rectData(x, y, w, h, rx, ry):
    if not (rx or ry):
        return "M%s,%s H%s V%s H%s Z" % (x, y, x + w, y + h, x)
    rx = min(rx or ry, w / 2)
    ry = min(ry or rx, h / 2)
    corner = "A%s,%s 0 0 1 %%s,%%s" % (rx, ry)
    return " ".join(
        [
            "M%s,%s H%s" % (x + rx, y, x + w - rx),
            corner % (x + w, y + ry),
            "V%s" % (y + h - ry),
            corner % (x + w - rx, y + h),
            "H%s" % (x + rx),
            corner % (x, y + h - ry),
            "V%s" % (y + ry),
            corner % (x + rx, y),
            "Z",
        ]
    )


def shapePathData(kind, attrib):
    """Path data equivalent to a basic shape, None for kinds that draw nothing."""
    get = lambda name: parseLength(attrib.get(name))
    if kind == NodeKind.PATH:
        return attrib.get("d", "")
    if kind == NodeKind.CIRCLE:
        return _ellipseData(get("cx"), get("cy"), get("r"), get("r"))
    if kind == NodeKind.ELLIPSE:
        return _ellipseData(get("cx"), get("cy"), get("rx"), get("ry"))
    if kind == NodeKind.RECT:
        return _rectData(get("x"), get("y"), get("width"), get("height"), get("rx"), get("ry"))
    if kind == NodeKind.LINE:
        return "M%s,%s L%s,%s" % (get("x1"), get("y1"), get("x2"), get("y2"))
    if kind in (NodeKind.POLYGON, NodeKind.POLYLINE):
        points = _pointList(attrib.get("points"))
        if not points:
            return ""
        d = "M" + " L".join("%s,%s" % p for p in points)
        return d + " Z" if kind == NodeKind.POLYGON else d
    return None
