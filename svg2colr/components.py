import logging
from dataclasses import dataclass
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class LayerComponent:
    key: str
    name: str
    glyph: Any  # TTX TTGlyph element
    lsb: int


def componentName(unicode, index):
    return "u%slayer%d" % (unicode, index)


class ComponentCache:
    """Compiled layer glyphs keyed by layer markup, shared by every character."""

    def __init__(self, compiler):
        self.compiler = compiler
        self.components = []
        self._byKey = {}

    def __len__(self):
        return len(self.components)

    def lookup(self, key, name):
        """Return ``(component, created)``; ``name`` is only used on a miss."""
        component = self._byKey.get(key)
        if component is not None:
            return component, False
        logger.debug("compiling layer %s", name)
        glyph, lsb = self.compiler.compile(key, name)
        component = LayerComponent(key, name, glyph, lsb)
        self._byKey[key] = component
        self.components.append(component)
        return component, True


class Palette:
    def __init__(self):
        self.colors = []
        self._ids = {}

    def __len__(self):
        return len(self.colors)

    def colorId(self, color):
        colorId = self._ids.get(color)
        if colorId is None:
            colorId = self._ids[color] = len(self.colors)
            self.colors.append(color)
        return colorId
