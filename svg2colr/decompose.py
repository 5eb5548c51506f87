import logging
from dataclasses import dataclass, replace
from typing import Optional

from .colorTools import applyOpacity, gradientColor, isCanonicalColor, normalizeColor, paintReference
from .config import BuildConfig
from .errors import Svg2ColrError
from .pathTools import closeSubpaths
from .svgScene import NodeKind, nodeBounds, parseLength
from .transformTools import expandPivotRotations, formatNumber


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaintState:
    fill: str = "#000000ff"
    stroke: str = "none"
    opacity: float = 1.0
    strokeWidth: str = "1"
    transform: Optional[str] = None


@dataclass(frozen=True, eq=False)
class Sublayer:
    """One self-contained monochrome shape, drawn in black, tagged with its color."""

    kind: NodeKind
    tag: str
    attrib: dict
    color: str

    @property
    def transformed(self):
        return "transform" in self.attrib

    @property
    def bounds(self):
        return nodeBounds(self.kind, self.attrib)


def _opacity(value):
    if value is None or not value.strip():
        return 1.0
    if value.strip().endswith("%"):
        return parseLength(value, 100.0) / 100
    return parseLength(value, 1.0)


class ShapeDecomposer:
    """Split the shapes of one document into fill and stroke sublayers.

    Definitions and gradients are collected in document order, so a
    reference can only see what was defined before it.
    """

    def __init__(self, name="", config=None):
        self.name = name
        self.config = config or BuildConfig()
        self.definitions = {}
        self.gradients = {}
        # references currently being expanded
        self._expanding = set()

    def decompose(self, nodes, paint=None):
        paint = paint or PaintState()
        sublayers = []
        for node in nodes:
            sublayers.extend(self._decomposeNode(node, paint))
        return sublayers

    def recordGradient(self, node):
        if node.id is None:
            return
        stops = [normalizeColor(stop) for stop in node.stops]
        stops = [stop for stop in stops if isCanonicalColor(stop)]
        if not stops and node.href in self.gradients:
            color = self.gradients[node.href]
        else:
            color = gradientColor(stops)
        self.gradients["#" + node.id] = color

    def define(self, node):
        if node.kind == NodeKind.GRADIENT:
            self.recordGradient(node)
            return
        if node.id is not None:
            self.definitions["#" + node.id] = node
        for child in node.children:
            self.define(child)

    def resolvePaint(self, value):
        if value is None or not value.strip():
            return None
        target = paintReference(value)
        if target is None:
            return normalizeColor(value)
        color = self.gradients.get(target)
        if color is None:
            logger.warning("%s: no mapping for %s", self.name, value)
        return color

    def _decomposeNode(self, node, paint):
        if node.kind == NodeKind.METADATA:
            return
        if node.kind == NodeKind.DEFINITIONS:
            for child in node.children:
                self.define(child)
            return
        if node.kind == NodeKind.GRADIENT:
            self.recordGradient(node)
            return

        if node.id is not None:
            self.definitions["#" + node.id] = node

        transform = node.paint.transform
        if transform:
            transform = expandPivotRotations(transform)

        fill = self.resolvePaint(node.paint.fill) or paint.fill
        stroke = self.resolvePaint(node.paint.stroke) or paint.stroke
        strokeWidth = node.paint.strokeWidth or paint.strokeWidth
        opacity = _opacity(node.paint.opacity) * paint.opacity

        inherited = PaintState(fill, stroke, opacity, strokeWidth, transform or paint.transform)

        if node.kind == NodeKind.GROUP:
            yield from self.decompose(node.children, inherited)
        elif node.kind == NodeKind.REFERENCE:
            target = self.definitions.get(node.href)
            if target is None:
                logger.debug("%s: dropping reference to unknown %s", self.name, node.href)
                return
            if node.href in self._expanding:
                raise Svg2ColrError(f"{self.name}: reference cycle through {node.href}")
            x, y = parseLength(node.attrib.get("x")), parseLength(node.attrib.get("y"))
            if x or y:
                offset = "translate(%s %s)" % (formatNumber(x), formatNumber(y))
                if target.paint.transform:
                    # the target's own transform replaces the inherited one
                    ownTransform = f"{offset} {target.paint.transform}"
                    paint = replace(target.paint, transform=ownTransform)
                    target = replace(target, id=None, paint=paint)
                else:
                    useTransform = inherited.transform
                    inherited = replace(inherited, transform=f"{useTransform} {offset}" if useTransform else offset)
            self._expanding.add(node.href)
            try:
                yield from self.decompose([target], inherited)
            finally:
                self._expanding.discard(node.href)
        else:
            yield from self._splitShape(node, inherited)

    def _splitShape(self, node, paint):
        isPath = node.kind == NodeKind.PATH
        pathData = node.attrib.get("d", "")

        if paint.fill != "none":
            attrib = dict(node.attrib)
            attrib["fill"] = "#000"
            attrib["stroke"] = "none"
            attrib["stroke-width"] = "0"
            if paint.transform:
                attrib["transform"] = paint.transform
            if isPath:
                attrib["d"] = closeSubpaths(pathData)
            color = paint.fill
            if paint.opacity != 1.0:
                color = applyOpacity(color, paint.opacity)
            yield Sublayer(node.kind, node.tag, attrib, color)

        if paint.stroke != "none":
            width = parseLength(paint.strokeWidth, 1.0)
            if self.config.dropsStroke(isPath, width, len(pathData)):
                logger.debug("%s: dropping thin stroke of width %s", self.name, paint.strokeWidth)
                return
            attrib = dict(node.attrib)
            attrib["fill"] = "none"
            attrib["stroke"] = "#000"
            attrib["stroke-width"] = paint.strokeWidth
            if paint.transform:
                attrib["transform"] = paint.transform
            yield Sublayer(node.kind, node.tag, attrib, applyOpacity(paint.stroke, paint.opacity))
