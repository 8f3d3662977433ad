"""
Unit tests for slicer_config module.

Tests config validation, dictionary conversion, and saving/loading files.
"""

import json
import tempfile
from pathlib import Path

import pytest

from SS_Libs.constants import SCHEMA_VERSION
from SS_Libs.ImageEditingLib.image_models import OutputSizePolicy, RgbColor
from SS_Libs.ProjStoreLib.slicer_config import SlicerConfig, load_config, save_config


class TestSlicerConfigDefaults:
    """Tests for default SlicerConfig values."""

    def test_defaults(self):
        config = SlicerConfig()

        assert config.mode == "grid"
        assert (config.rows, config.cols) == (1, 1)
        assert config.remove_background is False
        assert config.background_color is None
        assert config.tolerance == 30
        assert config.resample == "bilinear"

    def test_default_output_size_is_auto(self):
        assert SlicerConfig().output_size_policy() == OutputSizePolicy.auto()

    def test_custom_output_size(self):
        config = SlicerConfig(use_custom_size=True, custom_width=48, custom_height=24)

        assert config.output_size_policy() == OutputSizePolicy.custom(48, 24)


class TestSlicerConfigValidation:
    """Tests for SlicerConfig.__post_init__ validation."""

    def test_mode_is_normalized(self):
        assert SlicerConfig(mode=" Smart ").mode == "smart"

    @pytest.mark.parametrize("kwargs", [
        {"mode": "diagonal"},
        {"rows": 0},
        {"cols": -2},
        {"custom_width": 0},
        {"custom_height": 0},
        {"tolerance": -1},
        {"resample": "lanczos"},
        {"background_color": "not a color"},
    ])
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            SlicerConfig(**kwargs)

    def test_background_color_is_parsed(self):
        config = SlicerConfig(background_color="#ff00ff")

        assert config.background_color == RgbColor(255, 0, 255)


class TestSlicerConfigDict:
    """Tests for to_dict / from_dict."""

    def test_to_dict_contains_schema_version(self):
        data = SlicerConfig(background_color=(1, 2, 3)).to_dict()

        assert data["schema_version"] == SCHEMA_VERSION
        assert data["background_color"] == {"r": 1, "g": 2, "b": 3}

    def test_dict_round_trip(self):
        config = SlicerConfig(
            mode="smart",
            rows=2,
            cols=3,
            remove_background=True,
            background_color=RgbColor(9, 9, 9),
            use_custom_size=True,
            custom_width=32,
            custom_height=16,
            tolerance=12.5,
            resample="nearest",
        )

        assert SlicerConfig.from_dict(config.to_dict()) == config

    def test_unknown_keys_ignored(self):
        config = SlicerConfig.from_dict({"mode": "manual", "zoom": 4})

        assert config.mode == "manual"

    def test_numeric_strings_are_coerced(self):
        config = SlicerConfig.from_dict({"rows": "4", "cols": "2", "tolerance": "7"})

        assert (config.rows, config.cols, config.tolerance) == (4, 2, 7.0)

    @pytest.mark.parametrize("text, expected", [
        ("false", False), ("False", False), ("0", False), ("no", False),
        ("true", True), ("YES", True), ("1", True),
    ])
    def test_boolean_strings(self, text, expected):
        config = SlicerConfig.from_dict({"remove_background": text, "use_custom_size": text})

        assert config.remove_background is expected
        assert config.use_custom_size is expected

    def test_unknown_boolean_string_raises(self):
        with pytest.raises(ValueError):
            SlicerConfig.from_dict({"remove_background": "maybe"})

    def test_bad_numbers_raise_value_error(self):
        with pytest.raises(ValueError):
            SlicerConfig.from_dict({"rows": "many"})
        with pytest.raises(ValueError):
            SlicerConfig.from_dict({"custom_width": None})


class TestSaveLoadConfig:
    """Tests for save_config and load_config."""

    def test_save_and_load(self):
        """Should round trip a config through a JSON file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "walk.sscfg"
            config = SlicerConfig(mode="grid", rows=4, cols=8, remove_background=True)

            written = save_config(config, path)

            assert written == path
            assert path.exists()
            assert load_config(path) == config

    def test_saved_file_is_json(self, tmp_path):
        path = save_config(SlicerConfig(rows=2), tmp_path / "cfg.json")

        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["rows"] == 2
        assert data["schema_version"] == SCHEMA_VERSION

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)

    def test_newer_schema_raises(self, tmp_path):
        path = tmp_path / "future.json"
        path.write_text(json.dumps({"schema_version": SCHEMA_VERSION + 1}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)

    def test_missing_schema_version_loads(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(json.dumps({"mode": "smart"}), encoding="utf-8")

        assert load_config(path).mode == "smart"
