"""
project_importer/size_limit.py
-----------------------------------------------------------------------------
Read a single uploaded file into memory under a byte ceiling.

The ceiling is checked after every chunk, so an oversized upload is
rejected as soon as the running total passes the limit instead of after
the whole stream has been buffered.  Memory use therefore stays within
``limit_bytes + chunk_size`` however large the upload is.

A file of exactly ``limit_bytes`` is accepted; one byte more is rejected.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from project_importer.config import MAX_ASSET_SIZE_BYTES, READ_CHUNK_SIZE
from project_importer.errors import SizeLimitExceeded
from project_importer.storage import Storage

logger = logging.getLogger(__name__)


def effective_limit(storage: Storage, configured_bytes: int = MAX_ASSET_SIZE_BYTES) -> int:
    """The smaller of the configured asset ceiling and the backend job limit."""
    return min(configured_bytes, storage.max_job_size_bytes())


def read_bounded(stream: BinaryIO, limit_bytes: int, chunk_size: int = READ_CHUNK_SIZE) -> bytes:
    """
    Read ``stream`` to exhaustion, failing once more than ``limit_bytes``
    have been read.

    Parameters
    ----------
    stream      : Binary file-like object.  Not closed here.
    limit_bytes : Largest accepted size, inclusive.
    chunk_size  : Bytes requested per ``read`` call.

    Returns
    -------
    bytes : The complete content.

    Raises
    ------
    SizeLimitExceeded
        As soon as the running total exceeds ``limit_bytes``.  Whatever was
        buffered so far is dropped.
    """
    buffer = bytearray()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > limit_bytes:
            read_so_far = len(buffer)
            buffer.clear()
            logger.warning(
                "Rejected upload: %d bytes read exceeds %d-byte limit", read_so_far, limit_bytes
            )
            raise SizeLimitExceeded(limit_bytes, read_so_far)
    return bytes(buffer)
