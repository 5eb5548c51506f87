import pathlib
import tempfile
import unittest

from svg2colr.config import BuildConfig, configFromInfo, loadInfo
from svg2colr.errors import Svg2ColrError


class DropsStrokeTests(unittest.TestCase):
    def setUp(self):
        self.config = BuildConfig()

    def test_wide_strokes_are_kept(self):
        self.assertFalse(self.config.dropsStroke(True, 0.3, 1000))

    def test_only_paths_are_dropped(self):
        self.assertFalse(self.config.dropsStroke(False, 0.05, 1000))

    def test_hairline(self):
        self.assertTrue(self.config.dropsStroke(True, 0.1, 10))

    def test_long_path(self):
        self.assertTrue(self.config.dropsStroke(True, 0.25, 500))
        self.assertFalse(self.config.dropsStroke(True, 0.25, 499))


class ConfigFromInfoTests(unittest.TestCase):
    def test_defaults(self):
        config = configFromInfo({"1": "x"})
        self.assertEqual(config, BuildConfig())
        self.assertEqual(config.unitsPerEm, 512)
        self.assertEqual(config.baselineShift, 92)

    def test_build_settings(self):
        info = {"build": {"unitsPerEm": 1024, "colour": "red"}}
        with self.assertLogs("svg2colr.config", "WARNING") as logs:
            config = configFromInfo(info, outlineCompiler=None, maxCurveError=0.5)
        self.assertEqual(config.unitsPerEm, 1024)
        self.assertEqual(config.maxCurveError, 0.5)
        self.assertEqual(config.outlineCompiler, "pens")
        self.assertIn("colour", logs.output[0])

    def test_load_info(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = pathlib.Path(tmp)
            (source / "info.json").write_text('{"fontName": "A"}', encoding="utf-8")
            self.assertEqual(loadInfo(source), {"fontName": "A"})
            (source / "info.json").write_text("{", encoding="utf-8")
            with self.assertRaises(Svg2ColrError):
                loadInfo(source)


if __name__ == "__main__":
    unittest.main()
