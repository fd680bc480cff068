"""Baseline Resolver - Baseline artifact sources.

Two sources provide baseline apps:

- PackageFeed: NuGet v3 flat-container feed. Used for version lookups and,
  in Default mode, for the pinned baseline package.
- PlatformArtifactStore: versioned platform artifacts (Sandbox/W1). Used in
  Clean mode.

Both implement ArtifactSource.locate(), which downloads into a caller-owned
staging directory and returns the single matching app file. The caller
selects the source from the build mode (see source_for_mode).

All HTTP calls use a bounded timeout and no retries. Network and archive
failures are raised as FetchError.
"""

from __future__ import annotations

import json
import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Protocol

from baseline.config import (
    ARTIFACT_KIND,
    ARTIFACT_REGION,
    BASELINE_PACKAGE_ID,
    get_artifact_store_url,
    get_feed_url,
    get_http_timeout,
)
from baseline.errors import AmbiguousArtifactError, ArtifactNotFoundError, FetchError
from baseline.schemas import BuildMode
from baseline.utils.archive import extract_zip
from baseline.utils.paths import (
    package_app_dir,
    package_app_pattern,
    platform_artifact_dir,
    platform_app_pattern,
    platform_extensions_dir,
)
from baseline.utils.versions import version_sort_key

logger = logging.getLogger(__name__)

USER_AGENT = "baseline-resolver"


# --- HTTP Helpers ---


def _request(url: str, method: str = "GET") -> urllib.request.Request:
    return urllib.request.Request(url, method=method, headers={"User-Agent": USER_AGENT})


def download(url: str, dest: Path, timeout: float) -> None:
    """Stream url into dest, creating the parent directory.

    Raises:
        FetchError: On HTTP, network, or timeout failures.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        with urllib.request.urlopen(_request(url), timeout=timeout) as response, dest.open(
            "wb"
        ) as fh:
            shutil.copyfileobj(response, fh)
    except urllib.error.HTTPError as e:
        raise FetchError(f"Failed to download {url} ({e.code} {e.reason})") from e
    except urllib.error.URLError as e:
        raise FetchError(f"Failed to download {url}: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise FetchError(f"Failed to download {url}: {e}") from e


def _get_json(url: str, timeout: float) -> Any | None:
    """GET a JSON document. Returns None on 404."""
    try:
        with urllib.request.urlopen(_request(url), timeout=timeout) as response:
            payload = response.read()
    except urllib.error.HTTPError as e:
        if e.code == 404:
            return None
        raise FetchError(f"Request to {url} failed ({e.code} {e.reason})") from e
    except urllib.error.URLError as e:
        raise FetchError(f"Request to {url} failed: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise FetchError(f"Request to {url} failed: {e}") from e

    try:
        return json.loads(payload.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FetchError(f"Response from {url} is not valid JSON: {e}") from e


def _url_exists(url: str, timeout: float) -> bool:
    """HEAD url. False on 404, FetchError on any other failure."""
    try:
        with urllib.request.urlopen(_request(url, method="HEAD"), timeout=timeout):
            return True
    except urllib.error.HTTPError as e:
        if e.code == 404:
            return False
        raise FetchError(f"Request to {url} failed ({e.code} {e.reason})") from e
    except urllib.error.URLError as e:
        raise FetchError(f"Request to {url} failed: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise FetchError(f"Request to {url} failed: {e}") from e


# --- File Search ---


def find_single_match(directory: Path, pattern: str) -> Path:
    """Return the only file in directory matching pattern.

    Raises:
        ArtifactNotFoundError: If nothing matches (or directory is missing).
        AmbiguousArtifactError: If more than one file matches.
    """
    matches = sorted(p for p in directory.glob(pattern) if p.is_file()) if directory.is_dir() else []
    if not matches:
        raise ArtifactNotFoundError(f"No file matching '{pattern}' found in {directory}")
    if len(matches) > 1:
        names = ", ".join(p.name for p in matches)
        raise AmbiguousArtifactError(
            f"{len(matches)} files match '{pattern}' in {directory}: {names}"
        )
    return matches[0]


# --- Source Interfaces ---


class VersionFeed(Protocol):
    def find_latest_version(self, package_id: str) -> str | None: ...


class ArtifactSource(Protocol):
    """Downloads a baseline into a staging directory and locates its app file."""

    def locate(self, extension_name: str, version: str, staging_dir: Path) -> Path: ...


# --- Package Feed ---


class PackageFeed:
    """NuGet v3 flat-container feed."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        package_id: str = BASELINE_PACKAGE_ID,
    ):
        self.base_url = (base_url or get_feed_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_http_timeout()
        self.package_id = package_id

    def _package_root(self, package_id: str) -> str:
        return f"{self.base_url}/{package_id.lower()}"

    def find_latest_version(self, package_id: str) -> str | None:
        """Highest stable version published for package_id, or None."""
        index = _get_json(f"{self._package_root(package_id)}/index.json", self.timeout)
        if not isinstance(index, dict):
            return None
        versions = index.get("versions")
        if not isinstance(versions, list):
            return None

        keyed = []
        for version in versions:
            key = version_sort_key(str(version))
            if key is not None:
                keyed.append((key, str(version)))
        if not keyed:
            return None
        return max(keyed)[1]

    def package_url(self, package_id: str, version: str) -> str:
        pid = package_id.lower()
        ver = version.lower()
        return f"{self._package_root(package_id)}/{ver}/{pid}.{ver}.nupkg"

    def fetch_package(self, package_id: str, version: str, dest_dir: Path) -> Path:
        """Download package_id@version and extract it into dest_dir.

        Returns:
            dest_dir, now holding the package contents.
        """
        url = self.package_url(package_id, version)
        archive = dest_dir / f"{package_id.lower()}.{version}.nupkg"
        logger.info("Downloading %s %s from %s", package_id, version, url)
        download(url, archive, self.timeout)
        try:
            extract_zip(archive, dest_dir, decode_names=True)
        finally:
            archive.unlink(missing_ok=True)
        return dest_dir

    def locate(self, extension_name: str, version: str, staging_dir: Path) -> Path:
        self.fetch_package(self.package_id, version, staging_dir)
        return find_single_match(package_app_dir(staging_dir, extension_name), package_app_pattern())


# --- Platform Artifact Store ---


class PlatformArtifactStore:
    """Versioned platform artifacts addressed as {base}/{kind}/{version}/{region}."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or get_artifact_store_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_http_timeout()

    def resolve_download_url(self, kind: str, region: str, version: str) -> str | None:
        """Download URL for the artifact, or None if the store has no such artifact."""
        url = f"{self.base_url}/{kind.lower()}/{version}/{region.lower()}"
        if not _url_exists(url, self.timeout):
            logger.warning("No %s/%s artifact for version %s at %s", kind, region, version, url)
            return None
        return url

    def download(self, url: str, dest_dir: Path) -> Path:
        """Download the artifact zip at url and extract it into dest_dir."""
        dest_dir.mkdir(parents=True, exist_ok=True)
        archive = dest_dir.parent / f"{dest_dir.name}.zip"
        logger.info("Downloading platform artifact from %s", url)
        download(url, archive, self.timeout)
        try:
            extract_zip(archive, dest_dir)
        finally:
            archive.unlink(missing_ok=True)
        return dest_dir

    def locate(self, extension_name: str, version: str, staging_dir: Path) -> Path:
        url = self.resolve_download_url(ARTIFACT_KIND, ARTIFACT_REGION, version)
        if url is None:
            raise ArtifactNotFoundError(
                f"Unable to resolve {ARTIFACT_KIND}/{ARTIFACT_REGION} artifact URL for version {version}"
            )
        self.download(url, platform_artifact_dir(staging_dir, version))
        return find_single_match(
            platform_extensions_dir(staging_dir, version),
            platform_app_pattern(extension_name, version),
        )


def source_for_mode(build_mode: BuildMode) -> ArtifactSource:
    """Clean builds use platform artifacts; Default builds use the package feed."""
    if build_mode == BuildMode.CLEAN:
        return PlatformArtifactStore()
    return PackageFeed()
