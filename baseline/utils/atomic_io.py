"""Baseline Resolver - Atomic file publishing.

Manifests and copied baseline apps are published with the same rule:
1. Write to a temp path next to the final path
2. Flush + best-effort fsync
3. Rename temp -> final

Readers of the symbols directory or the manifest never observe a partially
written file. A failed write leaves the previous final file untouched.
"""

import os
from pathlib import Path

COPY_CHUNK_SIZE = 65536


def _write_all(fd: int, data: bytes) -> None:
    """Write every byte of data to fd, retrying short writes and EINTR.

    Raises:
        OSError: If the write fails or makes no progress.
    """
    view = memoryview(data)
    while view:
        try:
            written = os.write(fd, view)
        except InterruptedError:
            continue
        if written == 0:
            raise OSError("os.write() returned 0 bytes unexpectedly")
        view = view[written:]


def _temp_path_for(final_path: Path, temp_suffix: str) -> Path:
    return final_path.with_suffix(final_path.suffix + temp_suffix)


def _discard(path: Path) -> None:
    try:
        os.remove(path)
    except OSError:
        pass  # Best-effort cleanup


def _fsync_directory(dir_path: Path) -> None:
    """Best-effort fsync on a directory so the rename is durable."""
    try:
        fd = os.open(dir_path, os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except (OSError, AttributeError):
        # O_DIRECTORY is POSIX-only
        pass


def _publish(temp_path: Path, final_path: Path) -> None:
    os.replace(temp_path, final_path)
    _fsync_directory(final_path.parent)


def atomic_write_bytes(final_path: str | Path, data: bytes, temp_suffix: str = ".tmp") -> None:
    """Atomically write bytes to a file.

    Creates the parent directory if needed. Overwrites any stale temp file.

    Args:
        final_path: The target path for the final file.
        data: Bytes to write.
        temp_suffix: Suffix for the temporary file (default: ".tmp").

    Raises:
        OSError: If directory creation, write, or rename fails.
    """
    final_path = Path(final_path)
    temp_path = _temp_path_for(final_path, temp_suffix)
    final_path.parent.mkdir(parents=True, exist_ok=True)

    fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    try:
        _write_all(fd, data)
        os.fsync(fd)
    except OSError:
        os.close(fd)
        _discard(temp_path)
        raise
    os.close(fd)

    _publish(temp_path, final_path)


def atomic_write_text(
    final_path: str | Path,
    text: str,
    encoding: str = "utf-8",
    temp_suffix: str = ".tmp",
) -> None:
    """Atomically write text to a file.

    Raises:
        UnicodeEncodeError: If text cannot be represented in encoding.
        OSError: If directory creation, write, or rename fails.
    """
    atomic_write_bytes(final_path, text.encode(encoding), temp_suffix)


def atomic_copy_file(
    source_path: str | Path,
    final_path: str | Path,
    temp_suffix: str = ".tmp",
    chunk_size: int = COPY_CHUNK_SIZE,
) -> None:
    """Atomically copy source_path to final_path.

    Args:
        source_path: Path to the source file.
        final_path: Target path for the copied file.
        temp_suffix: Suffix for the temporary file (default: ".tmp").
        chunk_size: Buffer size for copying (default: 64KB).

    Raises:
        FileNotFoundError: If source file does not exist.
        OSError: If copy or rename fails.
    """
    source_path = Path(source_path)
    final_path = Path(final_path)
    temp_path = _temp_path_for(final_path, temp_suffix)

    if not source_path.is_file():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    final_path.parent.mkdir(parents=True, exist_ok=True)

    with open(source_path, "rb") as src:
        dst_fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        try:
            while chunk := src.read(chunk_size):
                _write_all(dst_fd, chunk)
            os.fsync(dst_fd)
        except OSError:
            os.close(dst_fd)
            _discard(temp_path)
            raise
        os.close(dst_fd)

    _publish(temp_path, final_path)
