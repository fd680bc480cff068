"""Baseline Resolver - Configuration constants and build settings.

Module-level constants describe the fixed names used by the build pipeline.
Endpoints and the HTTP timeout can be overridden through environment
variables. Build configuration values (baseline version, obsolete range,
repository version) are read from the repository's JSON settings files and
handed to operations as an explicit BuildSettings record.
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from baseline.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Package family that carries published baselines on the package feed
BASELINE_PACKAGE_ID = "AppBaselines-BCArtifacts"

# Platform artifact coordinates used in Clean mode
ARTIFACT_KIND = "sandbox"
ARTIFACT_REGION = "W1"

# Compatibility manifest consumed by the AppSourceCop analyzer
MANIFEST_FILENAME = "AppSourceCop.json"
MANIFEST_ENCODING = "ascii"

# Extension project descriptor
DESCRIPTOR_FILENAME = "app.json"
DEFAULT_PUBLISHER = "Microsoft"

# Package file extension for compiled apps
APP_FILE_SUFFIX = ".app"

DEFAULT_FEED_URL = "https://api.nuget.org/v3-flatcontainer"
DEFAULT_ARTIFACT_STORE_URL = "https://bcartifacts-exdbf9fwegejdqak.b02.azurefd.net"
DEFAULT_HTTP_TIMEOUT_SECONDS = 60

# Locations of the configuration files relative to the repository root
BUILD_CONFIG_RELPATH = Path("build") / "BuildConfig.json"
ALGO_SETTINGS_RELPATH = Path(".github") / "AL-Go-Settings.json"

# Configuration keys
KEY_BASELINE_VERSION = "BaselineVersion"
KEY_MAX_ALLOWED_OBSOLETE_VERSION = "MaxAllowedObsoleteVersion"
KEY_REPO_VERSION = "repoVersion"


def get_feed_url() -> str:
    """Base URL of the NuGet v3 flat-container feed (BASELINE_FEED_URL)."""
    return os.environ.get("BASELINE_FEED_URL", "").strip().rstrip("/") or DEFAULT_FEED_URL


def get_artifact_store_url() -> str:
    """Base URL of the platform artifact store (BASELINE_ARTIFACT_STORE_URL)."""
    env_val = os.environ.get("BASELINE_ARTIFACT_STORE_URL", "").strip().rstrip("/")
    return env_val or DEFAULT_ARTIFACT_STORE_URL


def get_http_timeout() -> int:
    """Get HTTP timeout from environment or use default.

    Environment variable BASELINE_HTTP_TIMEOUT_SEC allows override.
    Non-numeric or non-positive values fall back to the default.

    Returns:
        Timeout in seconds.
    """
    env_val = os.environ.get("BASELINE_HTTP_TIMEOUT_SEC")
    if env_val:
        try:
            timeout = int(env_val)
            if timeout > 0:
                return timeout
        except ValueError:
            pass
    return DEFAULT_HTTP_TIMEOUT_SECONDS


class ConfigType(str, Enum):
    """Configuration file a key is read from."""

    BUILD_CONFIG = "BuildConfig"
    AL_GO = "AL-Go"


_CONFIG_PATHS = {
    ConfigType.BUILD_CONFIG: BUILD_CONFIG_RELPATH,
    ConfigType.AL_GO: ALGO_SETTINGS_RELPATH,
}


def _load_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return data


def get_config_value(key: str, config_type: ConfigType, repo_root: str | Path) -> str | None:
    """Look up a single configuration value.

    Args:
        key: Configuration key (e.g. "BaselineVersion").
        config_type: Which configuration file to read.
        repo_root: Repository root containing the configuration files.

    Returns:
        The value as a string, or None if the file or key is absent.

    Raises:
        ConfigurationError: If the configuration file is malformed.
    """
    path = Path(repo_root) / _CONFIG_PATHS[config_type]
    value = _load_config_file(path).get(key)
    if value is None:
        logger.debug("Config key %s not found in %s", key, path)
        return None
    return str(value)


class BuildSettings(BaseModel):
    """Build configuration injected into the baseline operations."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    baseline_version: str | None = Field(
        default=None,
        description="Pinned baseline version used in Default mode",
    )
    max_allowed_obsolete_version: int | None = Field(
        default=None,
        description="Highest major version for which obsolete tags are allowed",
    )
    repo_version: str | None = Field(
        default=None,
        description="Current repository version (major.minor)",
    )

    def require_max_allowed_obsolete_version(self) -> int:
        if self.max_allowed_obsolete_version is None:
            raise ConfigurationError(f"{KEY_MAX_ALLOWED_OBSOLETE_VERSION} is not configured")
        return self.max_allowed_obsolete_version

    def require_repo_version(self) -> str:
        if not self.repo_version:
            raise ConfigurationError(f"{KEY_REPO_VERSION} is not configured")
        return self.repo_version


def load_build_settings(repo_root: str | Path) -> BuildSettings:
    """Assemble BuildSettings from the repository configuration files.

    Args:
        repo_root: Repository root directory.

    Returns:
        BuildSettings with every value found; missing values are None.

    Raises:
        ConfigurationError: If a file is malformed or
            MaxAllowedObsoleteVersion is not an integer.
    """
    max_obsolete_raw = get_config_value(
        KEY_MAX_ALLOWED_OBSOLETE_VERSION, ConfigType.BUILD_CONFIG, repo_root
    )
    max_obsolete = None
    if max_obsolete_raw is not None:
        try:
            max_obsolete = int(max_obsolete_raw)
        except ValueError as e:
            raise ConfigurationError(
                f"{KEY_MAX_ALLOWED_OBSOLETE_VERSION} must be an integer, got '{max_obsolete_raw}'"
            ) from e

    return BuildSettings(
        baseline_version=get_config_value(KEY_BASELINE_VERSION, ConfigType.BUILD_CONFIG, repo_root),
        max_allowed_obsolete_version=max_obsolete,
        repo_version=get_config_value(KEY_REPO_VERSION, ConfigType.AL_GO, repo_root),
    )
