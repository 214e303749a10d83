"""
Container Read/Write

A .docx is a ZIP package; the body lives in word/document.xml. Reading
never touches the source, and writing always produces a fresh archive:
the new package is written to a temporary file next to the target and
moved into place, so a failed write leaves nothing behind.
"""

import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Union

from .exceptions import MalformedInputError

logger = logging.getLogger(__name__)


PRIMARY_PART = "word/document.xml"

PathLike = Union[str, Path]

# os.umask can only be read by setting it; done once, before any worker threads
_UMASK = os.umask(0)
os.umask(_UMASK)

# Mode a plain open() would give a new file
OUTPUT_FILE_MODE = 0o666 & ~_UMASK


def _open_archive(source: bytes, label: str) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(source), "r")
    except zipfile.BadZipFile as e:
        raise MalformedInputError(f"Invalid DOCX: not a ZIP archive ({e})", source=label) from e


def read_document_xml(source: bytes, label: str = "") -> str:
    """
    Extract the primary markup part as text.

    Raises:
        MalformedInputError: archive unreadable or word/document.xml missing
    """
    with _open_archive(source, label) as archive:
        if PRIMARY_PART not in archive.namelist():
            raise MalformedInputError(f"Invalid DOCX: missing {PRIMARY_PART}", source=label)
        return archive.read(PRIMARY_PART).decode("utf-8")


def replace_document_xml(source: bytes, document_xml: str, label: str = "") -> bytes:
    """
    Re-package the archive with a new primary markup part.

    Entry order and names are preserved; every entry is written with
    DEFLATE compression.
    """
    buffer = io.BytesIO()
    with _open_archive(source, label) as archive:
        if PRIMARY_PART not in archive.namelist():
            raise MalformedInputError(f"Invalid DOCX: missing {PRIMARY_PART}", source=label)
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as out:
            for item in archive.infolist():
                data = archive.read(item.filename)
                if item.filename == PRIMARY_PART:
                    data = document_xml.encode("utf-8")
                item.compress_type = zipfile.ZIP_DEFLATED
                out.writestr(item, data)
    return buffer.getvalue()


def write_bytes_atomic(output_path: PathLike, data: bytes) -> Path:
    """
    Write to a temp file in the target directory, then os.replace it in.

    The file gets OUTPUT_FILE_MODE rather than mkstemp's owner-only mode.
    """
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=".docforge-", suffix=target.suffix, dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, OUTPUT_FILE_MODE)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target
