"""Baseline Resolver - Archive extraction.

Feed packages (.nupkg) and platform artifacts are zip archives. NuGet
packages store member names percent-encoded ("System%20Application"), so
extraction can optionally decode them. Members that would land outside the
destination directory are rejected.
"""

import logging
import zipfile
import zlib
from pathlib import Path
from urllib.parse import unquote

from baseline.errors import FetchError

logger = logging.getLogger(__name__)

# Packaging metadata that NuGet adds to every package
NUGET_METADATA_PREFIXES = ("_rels/", "package/", "[Content_Types].xml")


def _member_target(dest_dir: Path, name: str) -> Path:
    target = (dest_dir / name).resolve()
    if not target.is_relative_to(dest_dir):
        raise FetchError(f"Archive member escapes destination: {name}")
    return target


def extract_zip(archive_path: str | Path, dest_dir: str | Path, decode_names: bool = False) -> int:
    """Extract a zip archive into dest_dir.

    Args:
        archive_path: Path to the zip file.
        dest_dir: Directory to extract into (created if missing).
        decode_names: Percent-decode member names and skip NuGet metadata.

    Returns:
        Number of files extracted.

    Raises:
        FetchError: If the archive is corrupt or contains unsafe paths.
    """
    dest_dir = Path(dest_dir).resolve()
    dest_dir.mkdir(parents=True, exist_ok=True)

    extracted = 0
    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for info in zf.infolist():
                name = info.filename
                if decode_names:
                    if name.startswith(NUGET_METADATA_PREFIXES):
                        continue
                    name = unquote(name)
                target = _member_target(dest_dir, name)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    while chunk := src.read(65536):
                        dst.write(chunk)
                extracted += 1
    except zipfile.BadZipFile as e:
        raise FetchError(f"Archive {archive_path} is not a valid zip file: {e}") from e
    except (zlib.error, EOFError, NotImplementedError, RuntimeError, OSError) as e:
        raise FetchError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug("Extracted %d files from %s into %s", extracted, archive_path, dest_dir)
    return extracted
