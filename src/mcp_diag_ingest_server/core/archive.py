"""Archive member listing (ZIP, TAR, TAR.GZ) over in-memory buffers.

Only member names are read; member contents are never extracted.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zipfile
import zlib

logger = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"

_ZIP_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, EOFError)
_TAR_ERRORS = (tarfile.TarError, OSError, ValueError, EOFError, zlib.error)


def zip_entry_names(content: bytes) -> list[str] | None:
    """Return regular-file names from a ZIP central directory, or None if unreadable."""
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as zf:
            return [info.filename for info in zf.infolist() if not info.is_dir()]
    except _ZIP_ERRORS as exc:
        logger.debug("Not a readable zip archive: %s", exc)
        return None


def tar_entry_names(content: bytes) -> list[str] | None:
    """Return regular-file names from a TAR (optionally gzip-wrapped), or None if unreadable.

    Names read before a truncated or corrupt block are kept.
    """
    mode = "r:gz" if content.startswith(_GZIP_MAGIC) else "r:"
    names: list[str] = []
    try:
        with tarfile.open(fileobj=io.BytesIO(content), mode=mode) as tf:
            for member in tf:
                if member.isreg():
                    names.append(member.name)
    except _TAR_ERRORS as exc:
        logger.debug("Stopped reading tar archive (mode=%s): %s", mode, exc)
        if not names:
            return None
    return names


def list_entry_names(content: bytes) -> list[str] | None:
    """List regular-file member names of a ZIP or (gzipped) TAR archive.

    ZIP is tried first, then TAR. Returns None when neither format yields any entries.
    """
    names = zip_entry_names(content)
    if names:
        return names

    names = tar_entry_names(content)
    if names:
        return names
    return None
