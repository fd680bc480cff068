"""Baseline Resolver - Version string utilities.

Versions are dotted numeric strings. Manifest output always uses the
four-part form major.minor.patch.revision.
"""

import re

from baseline.errors import InvalidVersionFormatError

THREE_PART_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
FOUR_PART_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+")
LEADING_INTEGER_PATTERN = re.compile(r"[0-9]+")
DIGITS_PATTERN = re.compile(r"[0-9]+")

VERSION_EXAMPLE = "1.0.2.0"


def normalize_version(version: str) -> str:
    """Normalize a baseline version to four dotted numeric components.

    Exactly-three-part versions get a ".0" revision appended. Four-part
    versions are returned unchanged. Anything else (including two-part
    versions such as "24.0") is rejected.

    Args:
        version: Version string to normalize.

    Returns:
        Four-part version string.

    Raises:
        InvalidVersionFormatError: If the version is not 3- or 4-part numeric.
    """
    if THREE_PART_PATTERN.fullmatch(version):
        version = f"{version}.0"
    if not FOUR_PART_PATTERN.fullmatch(version):
        raise InvalidVersionFormatError(
            f"Version '{version}' is not valid, it must be like '{VERSION_EXAMPLE}'"
        )
    return version


def major_version(version: str) -> int:
    """Return the leading integer component of a version string.

    Raises:
        InvalidVersionFormatError: If the version does not start with digits.
    """
    match = LEADING_INTEGER_PATTERN.match(version.strip())
    if not match:
        raise InvalidVersionFormatError(
            f"Version '{version}' does not start with a numeric major component"
        )
    return int(match.group(0))


def allowed_obsolete_versions(current_major: int, max_major: int) -> list[str]:
    """Majors in (current_major, max_major], rendered as "<major>.0"."""
    return [f"{major}.0" for major in range(current_major + 1, max_major + 1)]


def version_sort_key(version: str) -> tuple[int, ...] | None:
    """Numeric sort key for a release version.

    Returns None for versions that are not purely dotted numeric
    (prerelease labels, build metadata), so callers can skip them.
    """
    parts = version.strip().split(".")
    if not all(DIGITS_PATTERN.fullmatch(part) for part in parts):
        return None
    return tuple(int(part) for part in parts)
