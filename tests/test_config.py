"""Tests for settings and the configuration manager."""
import json

import pytest

from smartedge.shared.configuration import (
    ApplicationSettings, ConfigManager, LoggingSettings, SmartEdgeOptions,
    get_config, initialize_config
)
from smartedge.shared.exceptions import ConfigurationError


class TestSmartEdgeOptions:

    def test_defaults(self):
        options = SmartEdgeOptions()
        assert options.grid_ratio == 10
        assert options.node_padding == 10
        assert options.debounce_time == 200
        assert options.max_nudge_radius == 32
        assert not options.diagonal
        assert options.smoothing == "compress"

    @pytest.mark.parametrize("overrides", [
        {'grid_ratio': 0},
        {'grid_ratio': -5},
        {'max_nudge_radius': 0},
        {'debounce_time': -1},
        {'smoothing': "spline"},
        {'node_padding': "10"},
    ])
    def test_invalid_options(self, overrides):
        with pytest.raises(ConfigurationError) as exc_info:
            SmartEdgeOptions(**overrides)
        assert exc_info.value.error_code == "INVALID_OPTIONS"

    def test_negative_padding_allowed(self):
        assert SmartEdgeOptions(node_padding=-2).node_padding == -2

    def test_frozen(self):
        options = SmartEdgeOptions()
        with pytest.raises(AttributeError):
            options.grid_ratio = 5


class TestLoggingSettings:
    def test_unknown_level(self):
        assert LoggingSettings(level="LOUD").validate()

    def test_defaults_valid(self):
        errors = ApplicationSettings().validate()
        assert errors == {'routing': [], 'logging': []}


class TestConfigManager:

    def test_defaults_without_file(self, tmp_path):
        manager = ConfigManager(tmp_path / "missing.json")
        assert manager.get_routing_options() == SmartEdgeOptions()

    def test_load_overrides(self, tmp_path):
        path = tmp_path / "smartedge.json"
        path.write_text(json.dumps({
            "routing": {"grid_ratio": 5, "diagonal": True, "unknown": 1},
            "logging": {"level": "DEBUG"}
        }))
        manager = ConfigManager(path)
        options = manager.get_routing_options()
        assert options.grid_ratio == 5
        assert options.diagonal
        assert options.node_padding == 10
        assert manager.get_settings().logging.level == "DEBUG"

    def test_invalid_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        manager = ConfigManager(path)
        assert manager.get_routing_options() == SmartEdgeOptions()
        assert not manager.load()

    def test_invalid_routing_values_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"routing": {"grid_ratio": -1}}))
        manager = ConfigManager(path)
        assert manager.get_routing_options().grid_ratio == 10

    def test_reset_all_categories(self, tmp_path):
        manager = ConfigManager(tmp_path / "none.json")
        manager.update_routing_settings(grid_ratio=2)
        manager.update_logging_settings(level="DEBUG")
        manager.reset_to_defaults()
        assert manager.get_settings() == ApplicationSettings()

    def test_update_logging_drops_unknown_keys(self, tmp_path):
        manager = ConfigManager(tmp_path / "none.json")
        manager.update_logging_settings(level="DEBUG", colour=True)
        assert manager.get_settings().logging.level == "DEBUG"
        assert not hasattr(manager.get_settings().logging, "colour")

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "out" / "config.json"
        manager = ConfigManager(path)
        manager.update_routing_settings(node_padding=4, smoothing="line_of_sight")
        assert manager.save()

        reloaded = ConfigManager(path)
        assert reloaded.get_routing_options().node_padding == 4
        assert reloaded.get_routing_options().smoothing == "line_of_sight"

    def test_update_rejects_invalid(self, tmp_path):
        manager = ConfigManager(tmp_path / "none.json")
        with pytest.raises(ConfigurationError):
            manager.update_routing_settings(grid_ratio=0)

    def test_reset(self, tmp_path):
        manager = ConfigManager(tmp_path / "none.json")
        manager.update_routing_settings(grid_ratio=2)
        manager.reset_category_to_defaults("routing")
        assert manager.get_routing_options().grid_ratio == 10

    def test_config_info(self, tmp_path):
        info = ConfigManager(tmp_path / "none.json").get_config_info()
        assert not info["config_exists"]
        assert info["validation_errors"] == {'routing': [], 'logging': []}

    def test_global_instance(self, tmp_path):
        manager = initialize_config(tmp_path / "none.json")
        assert get_config() is manager

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"routing": {"node_padding": 3}}))
        monkeypatch.setenv("SMARTEDGE_CONFIG", str(path))
        manager = ConfigManager()
        assert manager.config_path == path.resolve()
        assert manager.get_routing_options().node_padding == 3

    def test_non_object_category_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"routing": [1, 2]}))
        manager = ConfigManager(path)
        assert manager.get_routing_options() == SmartEdgeOptions()
