"""Baseline Resolver - Canonical path utilities.

Returns canonical Paths for manifests and artifact search locations.
Does NOT create directories. Directory creation is the responsibility of
the calling code.
"""

import glob
from pathlib import Path

from baseline.config import (
    APP_FILE_SUFFIX,
    ARTIFACT_KIND,
    ARTIFACT_REGION,
    DESCRIPTOR_FILENAME,
    MANIFEST_FILENAME,
)


def manifest_path(folder: str | Path) -> Path:
    """Get canonical path for the compatibility manifest.

    Args:
        folder: Extension folder.

    Returns:
        Path: {folder}/AppSourceCop.json
    """
    return Path(folder) / MANIFEST_FILENAME


def descriptor_path(folder: str | Path) -> Path:
    """Get canonical path for the extension descriptor.

    Returns:
        Path: {folder}/app.json
    """
    return Path(folder) / DESCRIPTOR_FILENAME


def platform_artifact_dir(staging_dir: str | Path, version: str) -> Path:
    """Directory a platform artifact is extracted into.

    Returns:
        Path: {staging_dir}/sandbox/{version}/W1
    """
    return Path(staging_dir) / ARTIFACT_KIND / version / ARTIFACT_REGION


def platform_extensions_dir(staging_dir: str | Path, version: str) -> Path:
    """Extensions folder inside an extracted platform artifact.

    Returns:
        Path: {staging_dir}/sandbox/{version}/W1/Extensions
    """
    return platform_artifact_dir(staging_dir, version) / "Extensions"


def platform_app_pattern(extension_name: str, version: str) -> str:
    """Glob pattern for an extension's app file in a platform artifact.

    Wildcard characters in the name or version are matched literally.
    """
    return f"*{glob.escape(extension_name)}_{glob.escape(version)}{APP_FILE_SUFFIX}"


def package_app_dir(staging_dir: str | Path, extension_name: str) -> Path:
    """Folder holding an extension's baseline app inside a feed package.

    Returns:
        Path: {staging_dir}/Apps/{extension_name}/Default
    """
    return Path(staging_dir) / "Apps" / extension_name / "Default"


def package_app_pattern() -> str:
    """Glob pattern for any app file in a feed package folder."""
    return f"*{APP_FILE_SUFFIX}"
