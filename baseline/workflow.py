"""Baseline Resolver - End-to-end baseline restore.

Runs the three steps a build pipeline needs before compiling an extension
with breaking-change checks:

  resolve version -> fetch baseline app -> patch AppSourceCop.json

The version is resolved once and passed unchanged to the other two steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from baseline.config import BuildSettings
from baseline.descriptor import read_extension_descriptor
from baseline.fetcher import fetch_baseline
from baseline.manifest import update_manifest
from baseline.resolver import resolve_baseline_version
from baseline.schemas import BuildMode
from baseline.sources import PackageFeed, source_for_mode

if TYPE_CHECKING:
    from baseline.sources import ArtifactSource, VersionFeed

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    """Outcome of a successful restore."""

    extension_name: str
    baseline_version: str
    artifact_path: Path
    manifest_path: Path


def restore_baseline(
    build_mode: BuildMode,
    extension_folder: str | Path,
    symbols_dir: str | Path,
    settings: BuildSettings,
    feed: VersionFeed | None = None,
    source: ArtifactSource | None = None,
) -> RestoreResult:
    """Restore the baseline for the extension in extension_folder.

    Args:
        build_mode: Resolution and download strategy.
        extension_folder: Folder containing app.json; the manifest is written here.
        symbols_dir: Directory that receives the baseline app.
        settings: Build configuration. repo_version and
            max_allowed_obsolete_version are required.
        feed: Version feed (default: PackageFeed()).
        source: Artifact source (default: chosen from build_mode).

    Returns:
        RestoreResult describing what was placed where.

    Raises:
        BaselineError: Any failure from the individual steps.
    """
    descriptor = read_extension_descriptor(extension_folder)
    repo_version = settings.require_repo_version()
    max_obsolete = settings.require_max_allowed_obsolete_version()

    version = resolve_baseline_version(build_mode, feed or PackageFeed(), settings)
    logger.info(
        "Restoring baseline %s for %s (%s mode)", version, descriptor.name, build_mode.value
    )

    artifact_path = fetch_baseline(
        source or source_for_mode(build_mode), descriptor.name, version, symbols_dir
    )
    manifest_path = update_manifest(
        descriptor.folder,
        descriptor.name,
        version,
        descriptor.publisher,
        repo_version,
        max_obsolete,
    )

    return RestoreResult(
        extension_name=descriptor.name,
        baseline_version=version,
        artifact_path=artifact_path,
        manifest_path=manifest_path,
    )
