"""Baseline Resolver - Baseline artifact fetcher.

Downloads a baseline through an ArtifactSource into a private staging
directory and copies the located app file into the symbols directory.
The staging directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from baseline.errors import FetchError
from baseline.utils.atomic_io import atomic_copy_file

if TYPE_CHECKING:
    from baseline.sources import ArtifactSource

logger = logging.getLogger(__name__)

STAGING_PREFIX = "baseline-"


def fetch_baseline(
    source: ArtifactSource,
    extension_name: str,
    baseline_version: str,
    target_symbols_dir: str | Path,
    staging_root: str | Path | None = None,
) -> Path:
    """Place the baseline app for extension_name into target_symbols_dir.

    Args:
        source: Where to fetch from (see sources.source_for_mode).
        extension_name: Extension whose baseline is needed.
        baseline_version: Version to fetch.
        target_symbols_dir: Destination directory (created if missing).
        staging_root: Parent for the staging directory (default: system temp).

    Returns:
        Path of the copied app file in target_symbols_dir.

    Raises:
        ArtifactNotFoundError: If the artifact or its app file is absent.
        AmbiguousArtifactError: If several app files match.
        FetchError: On network, extraction, or copy failure.
    """
    target_symbols_dir = Path(target_symbols_dir)
    staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=staging_root))
    logger.debug("Staging baseline %s %s in %s", extension_name, baseline_version, staging_dir)

    try:
        app_file = source.locate(extension_name, baseline_version, staging_dir)
        logger.info("Found baseline app %s", app_file.name)

        destination = target_symbols_dir / app_file.name
        try:
            target_symbols_dir.mkdir(parents=True, exist_ok=True)
            atomic_copy_file(app_file, destination)
        except OSError as e:
            raise FetchError(f"Failed to copy {app_file.name} to {target_symbols_dir}: {e}") from e
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)
        logger.debug("Removed staging directory %s", staging_dir)

    logger.info("Copied baseline %s to %s", app_file.name, target_symbols_dir)
    return destination
