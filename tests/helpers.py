import json
import xml.etree.ElementTree as ET


INFO = {
    "1": "Test Emoji",
    "2": "Regular",
    "4": [1, " ", 2],
    "version": "1.000",
    "fontName": "TestEmoji",
    "vendor": "TEST",
}

SQUARE = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 512 512">'
    '<rect x="64" y="64" width="128" height="128"/></svg>'
)

TARGET = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 512 512">'
    '<circle cx="256" cy="256" r="100" fill="#f00" stroke="#00f" stroke-width="8"/></svg>'
)


class StubCompiler:
    """Outline compiler producing empty glyphs, counting compilations."""

    def __init__(self):
        self.compiled = []

    def compile(self, markup, name):
        self.compiled.append(name)
        return ET.Element("TTGlyph", name=name), 0


def writeSources(sourceDir, documents, info=INFO):
    sourceDir.mkdir(parents=True, exist_ok=True)
    (sourceDir / "info.json").write_text(json.dumps(info), encoding="utf-8")
    for fileName, markup in documents.items():
        (sourceDir / fileName).write_text(markup, encoding="utf-8")
    return sourceDir
