"""Tests for configuration loading."""
import json

import pytest

from core.envai.exceptions import ConfigurationError
from core.envai.settings import PROJECT_ROOT, DashboardSettings, load_settings


@pytest.fixture
def config_paths(tmp_path):
    """Non-existent options.json and config.yaml paths in a temp directory."""
    return str(tmp_path / "options.json"), str(tmp_path / "config.yaml")


class TestDashboardSettings:
    """Tests for the settings dataclass."""

    def test_defaults(self):
        settings = DashboardSettings()

        assert settings.energy_rate == 0.12
        assert settings.window_strategy == "elapsed"
        assert settings.timezone is None
        assert settings.tzinfo is None
        assert settings.assistant_enabled is False

    def test_from_dict_accepts_camel_case(self):
        settings = DashboardSettings.from_dict({"energyRate": 0.2, "windowStrategy": "positional", "unknownKey": 1})

        assert settings.energy_rate == 0.2
        assert settings.window_strategy == "positional"

    @pytest.mark.parametrize("rate", [0, -0.1, "cheap"])
    def test_invalid_rate(self, rate):
        with pytest.raises(ConfigurationError):
            DashboardSettings.from_dict({"energy_rate": rate})

    def test_invalid_strategy(self):
        with pytest.raises(ConfigurationError):
            DashboardSettings.from_dict({"window_strategy": "sliding"})

    def test_invalid_timezone(self):
        with pytest.raises(ConfigurationError):
            DashboardSettings.from_dict({"timezone": "Mars/Olympus_Mons"})

    def test_timezone(self):
        settings = DashboardSettings.from_dict({"timezone": "Europe/Stockholm"})
        assert str(settings.tzinfo) == "Europe/Stockholm"

    def test_cors_origins_from_string(self):
        settings = DashboardSettings.from_dict({"cors_origins": "http://a.test, http://b.test"})
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_relative_data_path_resolves_against_project_root(self):
        settings = DashboardSettings(data_path="store/db.json")
        assert settings.resolved_data_path.startswith(PROJECT_ROOT)

    def test_absolute_data_path_kept(self, tmp_path):
        path = str(tmp_path / "db.json")
        assert DashboardSettings(data_path=path).resolved_data_path == path


class TestLoadSettings:
    """Tests for file and environment layering."""

    def test_no_files_gives_defaults(self, config_paths):
        settings = load_settings(*config_paths, env={})
        assert settings == DashboardSettings()

    def test_config_yaml_options(self, config_paths):
        options_path, config_path = config_paths
        with open(config_path, "w") as f:
            f.write("name: Envai\noptions:\n  energy_rate: 0.15\n  timezone: UTC\n")

        settings = load_settings(options_path, config_path, env={})

        assert settings.energy_rate == 0.15
        assert settings.timezone == "UTC"

    def test_options_json_takes_precedence(self, config_paths):
        options_path, config_path = config_paths
        with open(config_path, "w") as f:
            f.write("options:\n  energy_rate: 0.15\n")
        with open(options_path, "w") as f:
            json.dump({"dashboard": {"energyRate": 0.3}}, f)

        assert load_settings(options_path, config_path, env={}).energy_rate == 0.3

    def test_environment_overrides_files(self, config_paths):
        options_path, config_path = config_paths
        with open(config_path, "w") as f:
            f.write("options:\n  energy_rate: 0.15\n")

        settings = load_settings(
            options_path,
            config_path,
            env={"ENVAI_ENERGY_RATE": "0.25", "LLM_API_KEY": "sk-test", "ENVAI_WINDOW_STRATEGY": ""},
        )

        assert settings.energy_rate == 0.25
        assert settings.window_strategy == "elapsed"
        assert settings.assistant_enabled is True

    def test_bad_environment_value(self, config_paths):
        with pytest.raises(ConfigurationError):
            load_settings(*config_paths, env={"ENVAI_ENERGY_RATE": "twelve cents"})
