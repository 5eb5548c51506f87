import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .svgScene import SVG_NS


@dataclass(eq=False)
class ColorLayer:
    color: str
    sublayers: list = field(default_factory=list)

    @property
    def hasTransform(self):
        return any(s.transformed for s in self.sublayers)


def boxesOverlap(a, b):
    """Half-open intersection test of two (xMin, yMin, xMax, yMax) boxes."""
    return a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]


def addOrMerge(layers, sublayer):
    """Add ``sublayer`` to the topmost layer it can safely join.

    Scanning goes from the top of the stack down and gives up at the first
    layer that overlaps the new shape or holds a transformed shape, since
    merging below such a layer would change the painting order.
    """
    target = None
    if not sublayer.transformed:
        bounds = sublayer.bounds
        for layer in reversed(layers):
            if layer.hasTransform or any(boxesOverlap(bounds, s.bounds) for s in layer.sublayers):
                break
            if layer.color == sublayer.color:
                target = layer
                break
    if target is None:
        layers.append(ColorLayer(sublayer.color, [sublayer]))
    else:
        target.sublayers.append(sublayer)
    return layers


def mergeSublayers(sublayers):
    layers = []
    for sublayer in sublayers:
        addOrMerge(layers, sublayer)
    return layers


def layerElement(rootAttrib, layer):
    svg = ET.Element("{%s}svg" % SVG_NS, dict(rootAttrib))
    for sublayer in layer.sublayers:
        ET.SubElement(svg, sublayer.tag, dict(sublayer.attrib))
    return svg


def layerMarkup(rootAttrib, layer):
    """Serialized markup of a layer; identical markup means identical outlines."""
    return ET.tostring(layerElement(rootAttrib, layer), encoding="unicode")
