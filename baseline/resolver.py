"""Baseline Resolver - Baseline version resolution.

Clean builds compare against the latest baseline published on the package
feed. Default builds use the version pinned in the build configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from baseline.config import BASELINE_PACKAGE_ID, KEY_BASELINE_VERSION, BuildSettings
from baseline.errors import ResolutionError
from baseline.schemas import BuildMode

if TYPE_CHECKING:
    from baseline.sources import VersionFeed

logger = logging.getLogger(__name__)


def resolve_baseline_version(
    build_mode: BuildMode,
    feed: VersionFeed,
    settings: BuildSettings,
    package_id: str = BASELINE_PACKAGE_ID,
) -> str:
    """Determine the baseline version for this build.

    Args:
        build_mode: Clean queries the feed, Default reads the settings.
        feed: Anything with find_latest_version(package_id).
        settings: Build configuration.
        package_id: Package family carrying the baselines.

    Returns:
        The baseline version string as reported by its source.

    Raises:
        ResolutionError: If the feed has no version (Clean) or the pinned
            version is not configured (Default).
    """
    if build_mode == BuildMode.CLEAN:
        version = feed.find_latest_version(package_id)
        if not version:
            raise ResolutionError(f"No published version of {package_id} found on the package feed")
        logger.info("Resolved latest baseline %s from feed for %s", version, package_id)
        return version

    version = settings.baseline_version
    if not version:
        raise ResolutionError(f"{KEY_BASELINE_VERSION} is not set in the build configuration")
    logger.info("Using pinned baseline version %s", version)
    return version
