"""Baseline Resolver - Utility modules."""

from baseline.utils.atomic_io import atomic_copy_file, atomic_write_bytes, atomic_write_text
from baseline.utils.paths import descriptor_path, manifest_path
from baseline.utils.versions import allowed_obsolete_versions, major_version, normalize_version

__all__ = [
    # atomic_io
    "atomic_copy_file",
    "atomic_write_bytes",
    "atomic_write_text",
    # paths
    "descriptor_path",
    "manifest_path",
    # versions
    "allowed_obsolete_versions",
    "major_version",
    "normalize_version",
]
