import math
import re

from fontTools.misc.transform import Identity


_num = r"(-?(?:[0-9]*\.[0-9]+|[0-9]+))"
_pivotRotate = re.compile(r"rotate\(\s*" + _num + r"\s*[\s,]\s*" + _num + r"\s*[\s,]\s*" + _num + r"\s*\)")
_operation = re.compile(r"\s*,?\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
_value = re.compile(r"[-+]?(?:[0-9]*\.[0-9]+|[0-9]+\.?)(?:[eE][-+]?[0-9]+)?")


def formatNumber(value):
    return str(int(value)) if value == int(value) else repr(value)


def expandPivotRotations(transform):
    """Rewrite ``rotate(a cx cy)`` as translate, rotate, translate back.

    The outline importer only understands the one argument rotate.
    """
    while True:
        m = _pivotRotate.search(transform)
        if m is None:
            return transform
        angle, cx, cy = (float(v) for v in m.groups())
        replacement = "translate(%s %s) rotate(%s) translate(%s %s)" % (
            formatNumber(cx),
            formatNumber(cy),
            formatNumber(angle),
            formatNumber(-cx),
            formatNumber(-cy),
        )
        transform = transform[: m.start()] + replacement + transform[m.end() :]


def parseTransform(transform):
    """Parse an SVG transform list into a fontTools Transform."""
    result = Identity
    if not transform:
        return result
    pos = 0
    while pos < len(transform):
        m = _operation.match(transform, pos)
        if m is None:
            if transform[pos:].strip():
                raise ValueError(f"unsupported transform {transform!r}")
            break
        pos = m.end()
        name = m.group(1)
        args = [float(v) for v in _value.findall(m.group(2))]
        if name == "matrix" and len(args) == 6:
            result = result.transform(args)
        elif name == "translate" and len(args) in (1, 2):
            result = result.translate(args[0], args[1] if len(args) == 2 else 0)
        elif name == "scale" and len(args) in (1, 2):
            result = result.scale(args[0], args[1] if len(args) == 2 else args[0])
        elif name == "rotate" and len(args) == 1:
            result = result.rotate(math.radians(args[0]))
        elif name == "rotate" and len(args) == 3:
            angle, cx, cy = args
            result = result.translate(cx, cy).rotate(math.radians(angle)).translate(-cx, -cy)
        elif name == "skewX" and len(args) == 1:
            result = result.skew(math.radians(args[0]), 0)
        elif name == "skewY" and len(args) == 1:
            result = result.skew(0, math.radians(args[0]))
        else:
            raise ValueError(f"bad arguments for {name} in {transform!r}")
    return result
