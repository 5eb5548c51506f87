import math
import re

from .errors import InvalidColor


_canonical = re.compile(r"^#[0-9a-f]{8}$")
_hex = re.compile(r"^#(?:[0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$")
_rgbPercent = re.compile(r"^rgb\(\s*([^,)]+?)%\s*,\s*([^,)]+?)%\s*,\s*([^,)]+?)%\s*\)$")
_reference = re.compile(r"^url\(\s*['\"]?([^'\")]*?)['\"]?\s*\)$")


def roundHalfUp(value):
    return int(math.floor(value + 0.5))


def hexByte(value):
    return "%02x" % (value & 0xFF)


def isCanonicalColor(value):
    return isinstance(value, str) and _canonical.match(value) is not None


def paintReference(value):
    """Return the target of a ``url(#id)`` paint, None for a plain color."""
    if value is None:
        return None
    m = _reference.match(value.strip())
    return m.group(1) if m else None


def normalizeColor(value):
    """Return ``value`` as ``#rrggbbaa``.

    None and ``"none"`` are passed through. Raises InvalidColor for anything
    that isn't hex or an ``rgb()`` of percentages.
    """
    if value is None:
        return None
    color = value.strip().lower()
    if color == "none":
        return color
    if _hex.match(color):
        if len(color) == 4:
            color = "#" + "".join(c * 2 for c in color[1:])
        if len(color) == 7:
            color += "ff"
        return color
    m = _rgbPercent.match(color)
    if m is not None:
        try:
            channels = [float(v) for v in m.groups()]
        except ValueError:
            raise InvalidColor(value) from None
        return "#" + "".join(hexByte(min(max(roundHalfUp(c * 2.55), 0), 255)) for c in channels) + "ff"
    raise InvalidColor(value)


def applyOpacity(color, opacity):
    """Scale the alpha byte of a canonical color by ``opacity``."""
    if color is None or color == "none":
        return color
    alpha = roundHalfUp(opacity * int(color[7:9], 16))
    return color[:7] + hexByte(min(max(alpha, 0), 255))


def gradientColor(stopColors):
    """Flatten a gradient to the mean of its stop colors, fully opaque."""
    if not stopColors:
        return "#000000ff"
    channels = []
    for offset in (1, 3, 5):
        total = sum(int(c[offset : offset + 2], 16) for c in stopColors)
        channels.append(roundHalfUp(total / len(stopColors)))
    return "#" + "".join(hexByte(c) for c in channels) + "ff"
