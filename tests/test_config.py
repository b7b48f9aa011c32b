"""Tests for configuration loading and validation"""

import configparser
from pathlib import Path

import pytest
from pydantic import ValidationError

from tvdb_sync.exceptions import ConfigurationError
from tvdb_sync.models.config import SyncConfig
from tvdb_sync.storage.config_manager import ConfigManager


@pytest.fixture
def config_file(temp_dir):
    return temp_dir / "config.ini"


class TestSyncConfig:
    def test_defaults(self, temp_dir):
        config = SyncConfig(api_key="K", config_path=str(temp_dir))
        assert config.provider_enabled
        assert config.base_url == "https://thetvdb.com"
        assert config.series_data_path == temp_dir / "tvdb"
        assert config.library_path == temp_dir / "library.json"
        assert config.max_workers == 1
        assert config.update_interval_hours == 24

    def test_api_key_required_when_enabled(self, temp_dir):
        with pytest.raises(ValidationError, match="api_key"):
            SyncConfig(config_path=str(temp_dir))

    def test_api_key_not_required_when_disabled(self, temp_dir):
        config = SyncConfig(enable_internet_providers=False, config_path=str(temp_dir))
        assert not config.provider_enabled

        config = SyncConfig(disabled_fetchers=["TheTVDB"], config_path=str(temp_dir))
        assert not config.provider_enabled

    def test_disabled_fetchers_match_case_insensitively(self, temp_dir):
        config = SyncConfig(
            api_key="K", disabled_fetchers=["Other", "THETVDB"], config_path=str(temp_dir)
        )
        assert not config.provider_enabled

    def test_other_disabled_fetchers_leave_provider_enabled(self, temp_dir):
        config = SyncConfig(
            api_key="K", disabled_fetchers=["SomethingElse"], config_path=str(temp_dir)
        )
        assert config.provider_enabled

    def test_explicit_paths(self, temp_dir):
        config = SyncConfig(
            api_key="K",
            data_path=str(temp_dir / "cache"),
            library_file=str(temp_dir / "lib.json"),
            config_path=str(temp_dir),
        )
        assert config.series_data_path == temp_dir / "cache"
        assert config.library_path == temp_dir / "lib.json"

    def test_base_url_is_normalized(self, temp_dir):
        config = SyncConfig(
            api_key="K", base_url="http://mirror.example/", config_path=str(temp_dir)
        )
        assert config.base_url == "http://mirror.example"

    def test_language_is_lowercased(self, temp_dir):
        config = SyncConfig(api_key="K", preferred_language="DE", config_path=str(temp_dir))
        assert config.preferred_language == "de"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_workers", 0),
            ("max_workers", 17),
            ("update_interval_hours", 0),
            ("request_timeout", 0),
            ("requests_per_second", 0),
            ("base_url", "ftp://thetvdb.com"),
            ("preferred_language", ""),
        ],
    )
    def test_invalid_values(self, temp_dir, field, value):
        with pytest.raises(ValidationError):
            SyncConfig(api_key="K", config_path=str(temp_dir), **{field: value})

    def test_ini_keys_exclude_internal_fields(self):
        keys = SyncConfig.get_ini_keys()
        assert "config_path" not in keys
        assert {"api_key", "max_workers", "disabled_fetchers"} <= keys


class TestConfigManager:
    def test_missing_file(self, config_file):
        with pytest.raises(ConfigurationError, match="tvdb-sync init"):
            ConfigManager(config_file).load_config()

    def test_save_and_load(self, config_file):
        ConfigManager(config_file).save_new_config(
            {"api_key": "ABC", "disabled_fetchers": ["Fanart", "TMDb"], "max_workers": 4}
        )
        config = ConfigManager(config_file).load_config()

        assert config.api_key == "ABC"
        assert config.disabled_fetchers == ["Fanart", "TMDb"]
        assert config.max_workers == 4
        assert config.enable_internet_providers is True
        assert Path(config.config_path) == config_file.parent

    def test_cli_options_override_file(self, config_file):
        ConfigManager(config_file).save_new_config({"api_key": "ABC", "max_workers": 2})
        config = ConfigManager(config_file).load_config({"max_workers": 8})
        assert config.max_workers == 8

    def test_missing_keys_are_migrated(self, config_file):
        config_file.write_text("[DEFAULT]\napi_key = ABC\n", encoding="utf-8")
        config = ConfigManager(config_file).load_config()
        assert config.update_interval_hours == 24

        parser = configparser.ConfigParser(interpolation=None)
        parser.read(config_file, encoding="utf-8")
        assert parser["DEFAULT"]["update_interval_hours"] == "24"
        assert parser["DEFAULT"]["enable_internet_providers"] == "true"
        assert parser["DEFAULT"]["api_key"] == "ABC"

    def test_invalid_number(self, config_file):
        config_file.write_text(
            "[DEFAULT]\napi_key = ABC\nmax_workers = many\n", encoding="utf-8"
        )
        with pytest.raises(ConfigurationError, match="Invalid value"):
            ConfigManager(config_file).load_config()

    def test_validation_failure(self, config_file):
        ConfigManager(config_file).save_new_config({"api_key": ""})
        with pytest.raises(ConfigurationError, match="validation failed"):
            ConfigManager(config_file).load_config()

    def test_percent_signs_are_literal(self, config_file):
        ConfigManager(config_file).save_new_config({"api_key": "AB%CD"})
        assert ConfigManager(config_file).load_config().api_key == "AB%CD"
