"""Baseline Resolver - AppSourceCop.json manifest patching.

The manifest tells the AppSourceCop analyzer which baseline to compare
against and for which future major versions obsolete tags are allowed.

Serialization is deterministic: known keys in a fixed order, preserved
extra keys after them, two-space indent, ASCII only. Patching the same
manifest twice with the same inputs yields identical bytes.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from baseline.config import MANIFEST_ENCODING
from baseline.errors import ManifestParseError, ManifestWriteError
from baseline.schemas import CompatibilityManifest
from baseline.utils.atomic_io import atomic_write_text
from baseline.utils.paths import manifest_path
from baseline.utils.versions import allowed_obsolete_versions, major_version, normalize_version

logger = logging.getLogger(__name__)

KNOWN_KEYS = frozenset(
    field.alias or name for name, field in CompatibilityManifest.model_fields.items()
)


def load_manifest(path: Path) -> CompatibilityManifest:
    """Load an existing manifest.

    Known keys holding non-string values (numbers, null, ...) are dropped and
    fall back to their empty defaults; update_manifest overwrites them anyway.

    Raises:
        ManifestParseError: If the file cannot be read or is not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except OSError as e:
        raise ManifestParseError(f"Manifest {path} could not be read: {e}") from e
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestParseError(f"Manifest {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ManifestParseError(f"Manifest {path} must contain a JSON object")

    data = {
        key: value
        for key, value in data.items()
        if key not in KNOWN_KEYS or isinstance(value, str)
    }
    try:
        return CompatibilityManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(f"Manifest {path} has invalid fields: {e}") from e


def render_manifest(manifest: CompatibilityManifest) -> str:
    return json.dumps(manifest.to_json_dict(), indent=2, ensure_ascii=True) + "\n"


def update_manifest(
    folder: str | Path,
    extension_name: str,
    baseline_version: str,
    publisher: str,
    repo_version: str,
    max_allowed_obsolete_major: int,
) -> Path:
    """Create or patch <folder>/AppSourceCop.json.

    Args:
        folder: Extension folder holding the manifest.
        extension_name: Value for "name".
        baseline_version: Baseline version; 3-part versions get ".0" appended.
        publisher: Value for "publisher".
        repo_version: Current build version; stored as "obsoleteTagVersion"
            and its leading integer is the current major.
        max_allowed_obsolete_major: Upper bound (inclusive) of the allowed range.

    Returns:
        Path of the written manifest.

    Raises:
        InvalidVersionFormatError: If baseline_version is not 3- or 4-part
            numeric, or repo_version has no numeric major.
        ManifestParseError: If the existing manifest is malformed.
        ManifestWriteError: If the manifest cannot be written or is missing afterward.
    """
    version = normalize_version(baseline_version)
    current_major = major_version(repo_version)

    path = manifest_path(folder)
    if path.exists():
        logger.debug("Updating existing manifest %s", path)
        manifest = load_manifest(path)
    else:
        logger.info("Creating manifest %s", path)
        manifest = CompatibilityManifest(version="")

    manifest.version = version
    manifest.name = extension_name
    manifest.publisher = publisher
    manifest.obsolete_tag_version = repo_version
    manifest.obsolete_tag_allowed_versions = ",".join(
        allowed_obsolete_versions(current_major, max_allowed_obsolete_major)
    )

    try:
        atomic_write_text(path, render_manifest(manifest), encoding=MANIFEST_ENCODING)
    except OSError as e:
        raise ManifestWriteError(f"Manifest {path} could not be written: {e}") from e

    if not path.exists():
        raise ManifestWriteError(f"Manifest {path} does not exist after writing")

    logger.info(
        "Manifest %s: version=%s obsoleteTagAllowedVersions=%s",
        path,
        version,
        manifest.obsolete_tag_allowed_versions or "(none)",
    )
    return path
