"""File handler module: encoding-aware read and atomic write.

Provides the file I/O primitives used by the transforms and the sync
engine.  Every ``OSError`` that is not an expected "missing file" is
re-raised as ``FilesystemError`` so callers see one failure type.
"""

import os
import tempfile
from pathlib import Path

from charset_normalizer import from_bytes

from docs_sync.errors import FilesystemError

# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).

    Raises:
        FilesystemError: If the file cannot be read.
    """
    raw = read_bytes(path)
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        # Detection failed, fall back to utf-8
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # Normalize ascii to utf-8 (ascii is a strict subset of utf-8)
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def read_text(path: Path) -> str:
    """Read a text file, discarding the detected encoding."""
    content, _ = read_file_with_encoding(path)
    return content


def read_bytes(path: Path) -> bytes:
    """Read raw bytes, wrapping failures in ``FilesystemError``."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise FilesystemError("read", path, exc) from exc


def read_existing_bytes(path: Path) -> bytes | None:
    """Read *path* if it exists.

    Returns:
        The file's bytes, or ``None`` when the file does not exist.

    Raises:
        FilesystemError: For any failure other than a missing file.
    """
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise FilesystemError("read", path, exc) from exc


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Replace *path* with *data* in a single ``os.replace``.

    Writes to a temporary file in the target directory first so readers
    never observe a partially written file.

    Raises:
        FilesystemError: If the directory cannot be created or the write
            fails.  The temporary file is removed on failure.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise FilesystemError("write", path, exc) from exc

    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        # mkstemp creates 0600 files; keep the mode a normal write would give
        mode = path.stat().st_mode & 0o777 if path.exists() else 0o644
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException as exc:
        # Clean up temp file on any failure.
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        if isinstance(exc, OSError):
            raise FilesystemError("write", path, exc) from exc
        raise

