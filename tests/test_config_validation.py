import os
import tempfile
import unittest

from pydantic import ValidationError

from vectormotion.config.schemas import PlaceholderSettings
from vectormotion.core import load_config, load_yaml
from vectormotion.config import EngineConfig


class TestConfig(unittest.TestCase):
    def _write(self, text):
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_load(self):
        cfg = load_config()
        self.assertIsInstance(cfg, EngineConfig)
        self.assertEqual(cfg.transforms.translate_precision, 0)
        self.assertEqual(cfg.placeholders.default_font_size, 18.0)
        self.assertTrue(cfg.clips.reveal_padding_px > 0)

    def test_explicit_path_overrides(self):
        path = self._write("transforms:\n  translate_precision: null\nplaceholders:\n  stroke_width_factor: 2\n")
        cfg = load_config(path)
        self.assertIsNone(cfg.transforms.translate_precision)
        self.assertEqual(cfg.placeholders.stroke_width_factor, 2)
        self.assertEqual(cfg.placeholders.letter_spacing_boost, 8.0)

    def test_invalid_values_raise(self):
        path = self._write("placeholders:\n  wave_progress_range: [0.9, 0.1]\n")
        with self.assertRaises(ValidationError):
            load_config(path)

    def test_missing_file_uses_defaults(self):
        cfg = load_config(os.path.join(tempfile.gettempdir(), "does-not-exist.yaml"))
        self.assertEqual(cfg, EngineConfig())

    def test_yaml_must_be_mapping(self):
        path = self._write("- just\n- a list\n")
        with self.assertRaises(ValueError):
            load_yaml(path)

    def test_progress_range_bounds(self):
        with self.assertRaises(ValidationError):
            PlaceholderSettings(wave_progress_range=(0.0, 1.5))


if __name__ == "__main__":
    unittest.main()
