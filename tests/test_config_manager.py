"""Tests for config.config_manager: defaults, deep merge, dotted access, saving."""
import pytest
import yaml

from config.config_manager import DEFAULT_CONFIG, ConfigManager


class TestLoad:
    def test_missing_file_is_created_from_defaults(self, tmp_path):
        path = tmp_path / "cfg" / "config.yaml"
        cm = ConfigManager(str(path))
        assert path.exists()
        assert cm.config == DEFAULT_CONFIG
        assert cm.config is not DEFAULT_CONFIG

    def test_user_values_are_deep_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"view": {"orientation_filter": 2}, "quick_save_path": "/tmp/q"}))
        cm = ConfigManager(str(path))
        assert cm.get("view.orientation_filter") == 2
        assert cm.get("view.grid_mode") is True
        assert cm.get("quick_save_path") == "/tmp/q"
        assert cm.get("gui.thumbnail_width") == 100

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("view: [unclosed")
        with pytest.raises(ValueError):
            ConfigManager(str(path))

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            ConfigManager(str(path))

    def test_empty_file_means_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert ConfigManager(str(path)).config == DEFAULT_CONFIG


class TestAccess:
    def test_get_missing_returns_default(self, tmp_path):
        cm = ConfigManager(str(tmp_path / "c.yaml"))
        assert cm.get("no.such.key", "fallback") == "fallback"
        assert cm.get("logging_level.deeper", 5) == 5

    def test_set_saves_by_default(self, tmp_path):
        path = tmp_path / "c.yaml"
        cm = ConfigManager(str(path))
        cm.set("folders.spotlight", "/data/iris")
        assert yaml.safe_load(path.read_text())["folders"]["spotlight"] == "/data/iris"

    def test_set_without_save(self, tmp_path):
        path = tmp_path / "c.yaml"
        cm = ConfigManager(str(path))
        cm.set("view.resolution_filter", 3, save=False)
        assert cm.get("view.resolution_filter") == 3
        assert yaml.safe_load(path.read_text())["view"]["resolution_filter"] == 0
        cm.save_config()
        assert yaml.safe_load(path.read_text())["view"]["resolution_filter"] == 3

    def test_set_creates_intermediate_sections(self, tmp_path):
        cm = ConfigManager(str(tmp_path / "c.yaml"))
        cm.set("brand.new.key", "v", save=False)
        assert cm.get("brand.new.key") == "v"

    def test_logging_level(self, tmp_path):
        assert ConfigManager(str(tmp_path / "c.yaml")).logging_level == "INFO"

    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        cm = ConfigManager()
        assert cm.config_path == str(tmp_path / "wallpaperviewer" / "config.yaml")
