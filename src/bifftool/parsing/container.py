"""OLE compound document access.

Legacy .xls files are OLE2 structured storage containers; the BIFF8
records live in a stream named "Workbook". This module only reads:
the stream is extracted once and all editing happens on the bytes.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path

import olefile

from bifftool.exceptions import InvalidContainerError, StreamNotFoundError

logger = logging.getLogger(__name__)

WORKBOOK_STREAM = "Workbook"


def _open(source: str | os.PathLike[str] | bytes) -> olefile.OleFileIO:
    """Open a container from a path or in-memory bytes."""
    if isinstance(source, bytes):
        target: object = io.BytesIO(source)
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        target = str(path)
    try:
        return olefile.OleFileIO(target)
    except OSError as e:
        raise InvalidContainerError(f"Not an OLE compound document: {e}") from e


def read_workbook_stream(
    source: str | os.PathLike[str] | bytes,
    stream_name: str = WORKBOOK_STREAM,
) -> bytes:
    """Read the raw record stream out of a compound document.

    Args:
        source: Path to an .xls file, or the file contents
        stream_name: Stream to extract

    Returns:
        Stream contents

    Raises:
        FileNotFoundError: If a path is given and doesn't exist
        InvalidContainerError: If source is not an OLE compound document
        StreamNotFoundError: If the container has no such stream
    """
    with _open(source) as ole:
        if not ole.exists(stream_name):
            raise StreamNotFoundError(stream_name)
        data = ole.openstream(stream_name).read()
    logger.debug("Read %d bytes from %s stream", len(data), stream_name)
    return data


def list_streams(source: str | os.PathLike[str] | bytes) -> list[str]:
    """List the streams in a compound document as slash-joined paths."""
    with _open(source) as ole:
        return ["/".join(entry) for entry in ole.listdir(streams=True, storages=False)]
