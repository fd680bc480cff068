"""Tests for baseline.config module."""

import json

import pytest

from baseline.config import (
    DEFAULT_FEED_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    BuildSettings,
    ConfigType,
    get_config_value,
    get_feed_url,
    get_http_timeout,
    load_build_settings,
)
from baseline.errors import ConfigurationError


def _write_configs(root, build_config=None, algo_settings=None):
    if build_config is not None:
        (root / "build").mkdir(exist_ok=True)
        (root / "build" / "BuildConfig.json").write_text(json.dumps(build_config))
    if algo_settings is not None:
        (root / ".github").mkdir(exist_ok=True)
        (root / ".github" / "AL-Go-Settings.json").write_text(json.dumps(algo_settings))


class TestGetConfigValue:
    """Tests for get_config_value function."""

    def test_reads_build_config(self, tmp_path):
        _write_configs(tmp_path, build_config={"BaselineVersion": "24.0.0"})
        assert get_config_value("BaselineVersion", ConfigType.BUILD_CONFIG, tmp_path) == "24.0.0"

    def test_reads_algo_settings(self, tmp_path):
        _write_configs(tmp_path, algo_settings={"repoVersion": "26.0"})
        assert get_config_value("repoVersion", ConfigType.AL_GO, tmp_path) == "26.0"

    def test_missing_key_is_none(self, tmp_path):
        _write_configs(tmp_path, build_config={"Other": 1})
        assert get_config_value("BaselineVersion", ConfigType.BUILD_CONFIG, tmp_path) is None

    def test_missing_file_is_none(self, tmp_path):
        assert get_config_value("BaselineVersion", ConfigType.BUILD_CONFIG, tmp_path) is None

    def test_non_string_values_are_stringified(self, tmp_path):
        _write_configs(tmp_path, build_config={"MaxAllowedObsoleteVersion": 27})
        value = get_config_value("MaxAllowedObsoleteVersion", ConfigType.BUILD_CONFIG, tmp_path)
        assert value == "27"

    def test_malformed_file_raises(self, tmp_path):
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "BuildConfig.json").write_text("{oops")
        with pytest.raises(ConfigurationError):
            get_config_value("BaselineVersion", ConfigType.BUILD_CONFIG, tmp_path)


class TestLoadBuildSettings:
    """Tests for load_build_settings function."""

    def test_loads_all_values(self, tmp_path):
        _write_configs(
            tmp_path,
            build_config={"BaselineVersion": "24.0.0", "MaxAllowedObsoleteVersion": 27},
            algo_settings={"repoVersion": "26.0"},
        )

        settings = load_build_settings(tmp_path)

        assert settings == BuildSettings(
            baseline_version="24.0.0", max_allowed_obsolete_version=27, repo_version="26.0"
        )

    def test_missing_values_are_none(self, tmp_path):
        settings = load_build_settings(tmp_path)
        assert settings == BuildSettings()

    def test_non_integer_max_obsolete_raises(self, tmp_path):
        _write_configs(tmp_path, build_config={"MaxAllowedObsoleteVersion": "next"})
        with pytest.raises(ConfigurationError, match="must be an integer"):
            load_build_settings(tmp_path)

    def test_require_helpers(self):
        settings = BuildSettings()
        with pytest.raises(ConfigurationError):
            settings.require_repo_version()
        with pytest.raises(ConfigurationError):
            settings.require_max_allowed_obsolete_version()


class TestEnvironmentOverrides:
    """Tests for environment-driven settings."""

    def test_http_timeout_default(self, monkeypatch):
        monkeypatch.delenv("BASELINE_HTTP_TIMEOUT_SEC", raising=False)
        assert get_http_timeout() == DEFAULT_HTTP_TIMEOUT_SECONDS

    def test_http_timeout_override(self, monkeypatch):
        monkeypatch.setenv("BASELINE_HTTP_TIMEOUT_SEC", "5")
        assert get_http_timeout() == 5

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_http_timeout_invalid_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("BASELINE_HTTP_TIMEOUT_SEC", value)
        assert get_http_timeout() == DEFAULT_HTTP_TIMEOUT_SECONDS

    def test_feed_url_override_strips_slash(self, monkeypatch):
        monkeypatch.setenv("BASELINE_FEED_URL", "https://feed.example.invalid/v3/")
        assert get_feed_url() == "https://feed.example.invalid/v3"

    def test_feed_url_default(self, monkeypatch):
        monkeypatch.delenv("BASELINE_FEED_URL", raising=False)
        assert get_feed_url() == DEFAULT_FEED_URL
