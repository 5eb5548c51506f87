"""Sampling of SVG path data, good enough for bounding boxes.

Curves are not subdivided: control points are sampled along with end points,
which can only make a box larger. Elliptical arcs contribute their end point
only, so a path with wide arcs may get a box that is too small.
"""

import re


_command = re.compile(r"\s*([MmLlHhVvCcSsQqTtAaZz])")
_number = r"\s*([-+]?(?:[0-9]*\.[0-9]+|[0-9]+\.?)(?:[eE][-+]?[0-9]+)?)\s*,?"
_coordinates = {n: re.compile(_number * n) for n in (1, 2, 4, 6, 7)}

# number of values consumed per repetition of each command
_arity = {"m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7, "z": 0}


def _takeCoordinates(d, pos, count):
    m = _coordinates[count].match(d, pos)
    if m is None:
        return None, pos
    return [float(v) for v in m.groups()], m.end()


def samplePath(d):
    """Return the points needed to bound path data ``d``.

    Sampling stops at the first token it doesn't understand and returns
    what was collected up to there.
    """
    points = []
    x = y = 0.0
    start = (0.0, 0.0)
    pos = 0
    while pos < len(d):
        m = _command.match(d, pos)
        if m is None:
            break
        pos = m.end()
        op = m.group(1)
        relative = op.islower()
        kind = op.lower()

        if kind == "z":
            x, y = start
            points.append((x, y))
            continue

        first = True
        while True:
            values, pos = _takeCoordinates(d, pos, _arity[kind])
            if values is None:
                break
            dx, dy = (x, y) if relative else (0.0, 0.0)
            if kind in "mlt":
                x, y = dx + values[0], dy + values[1]
                points.append((x, y))
                if kind == "m" and first:
                    start = (x, y)
            elif kind == "h":
                x = dx + values[0]
                points.append((x, y))
            elif kind == "v":
                y = dy + values[0]
                points.append((x, y))
            elif kind == "c":
                points.append((dx + values[0], dy + values[1]))
                points.append((dx + values[2], dy + values[3]))
                x, y = dx + values[4], dy + values[5]
                points.append((x, y))
            elif kind in "sq":
                points.append((dx + values[0], dy + values[1]))
                x, y = dx + values[2], dy + values[3]
                points.append((x, y))
            elif kind == "a":
                x, y = dx + values[5], dy + values[6]
                points.append((x, y))
            first = False
    return points


def pathBounds(d):
    points = samplePath(d)
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def closeSubpaths(d):
    """Close every subpath before the next moveto starts.

    Outline import doesn't handle unclosed subpaths reliably.
    """
    d = d.replace("M", "zM").replace("m", "zm")
    d = re.sub(r"^\s*z", "", d)
    return re.sub(r"[zZ](?:\s*[zZ])+", "z", d)
