"""Tests for editor constants and the JSON settings file."""
import json

import pytest

from clip_editor import config
from clip_editor.config import EditorConfig


@pytest.fixture
def settings_file(monkeypatch, tmp_path):
    config_dir = tmp_path / "ClipCrop"
    path = config_dir / "settings.json"
    monkeypatch.setattr(config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(config, "SETTINGS_FILE", str(path))
    return path


class TestEditorConfig:
    def test_defaults(self):
        cfg = EditorConfig()
        assert (cfg.min_crop, cfg.min_duration, cfg.hit_radius) == (50.0, 1.0, 12.0)
        assert (cfg.step_default, cfg.step_fine, cfg.step_coarse) == (0.1, 0.01, 1.0)
        assert cfg.min_export_duration == 0.1

    def test_from_dict_ignores_unknown_keys(self):
        cfg = EditorConfig.from_dict({"min_crop": 80, "theme": "dark"})
        assert cfg.min_crop == 80
        assert cfg.min_duration == 1.0

    def test_dict_round_trip(self):
        cfg = EditorConfig(hit_radius=8.0, max_log_entries=50)
        assert EditorConfig.from_dict(cfg.to_dict()) == cfg


class TestSettings:
    def test_missing_file_is_empty(self, settings_file):
        assert config.load_settings() == {}
        assert config.get_setting("last_directory", "/home") == "/home"

    def test_save_then_get(self, settings_file):
        config.save_settings("last_directory", "/videos")
        config.save_settings("editor", {"min_crop": 64})

        assert config.get_setting("last_directory") == "/videos"
        assert json.loads(settings_file.read_text())["editor"] == {"min_crop": 64}

    def test_corrupt_file_falls_back(self, settings_file):
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("{not json")
        assert config.load_settings() == {}

    def test_editor_section(self, settings_file):
        config.save_settings("editor", {"min_duration": 0.5, "hit_radius": 20})
        cfg = config.load_editor_config()
        assert cfg.min_duration == 0.5
        assert cfg.hit_radius == 20
        assert cfg.min_crop == 50.0

    def test_malformed_editor_section(self, settings_file):
        config.save_settings("editor", [1, 2, 3])
        assert config.load_editor_config() == EditorConfig()


class TestLogging:
    def test_setup_logging_returns_app_logger(self):
        log = config.setup_logging("debug", log_file=None)
        assert log is config.logger
        assert log.name == "ClipCrop"
