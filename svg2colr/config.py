import json
import logging
from dataclasses import dataclass, fields, replace

from .errors import Svg2ColrError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildConfig:
    unitsPerEm: int = 512
    ascent: int = 466
    descent: int = -46
    lineGap: int = 46
    advanceWidth: int = 512
    # outlines are imported on a 512 high em and moved down by this much
    baselineShift: float = 92.0

    # strokes thinner than this are dropped when also very thin or very long
    thinStrokeWidth: float = 0.25
    hairlineStrokeWidth: float = 0.1
    longPathLength: int = 500

    maxCurveError: float = 1.0
    outlineCompiler: str = "pens"

    def dropsStroke(self, isPath, strokeWidth, pathLength):
        """Thin-stroke exclusion, only ever applied to paths."""
        if not isPath or strokeWidth > self.thinStrokeWidth:
            return False
        return pathLength >= self.longPathLength or strokeWidth <= self.hairlineStrokeWidth


def loadInfo(sourceDir):
    path = sourceDir / "info.json"
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise Svg2ColrError(f"{path}: {e}") from e


def configFromInfo(info, **overrides):
    known = {f.name for f in fields(BuildConfig)}
    settings = dict(info.get("build", {}))
    for key in sorted(set(settings) - known):
        logger.warning("ignoring unknown build setting %r", key)
        del settings[key]
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return replace(BuildConfig(), **settings)
