"""
Uploader: put one local file under its content-addressed key.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import aiofiles

from contentsync.connections.storage import BaseStorageConnection
from contentsync.exceptions import LocalIOError
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.core.uploader")


def object_key_for(digest: str, filepath: str | Path) -> str:
    """Remote key is the digest followed by the source file's extension (dot included)."""
    return digest + os.path.splitext(str(filepath))[1]


async def read_file(filepath: str | Path) -> bytes:
    try:
        async with aiofiles.open(filepath, "rb") as f:
            return await f.read()
    except OSError as e:
        raise LocalIOError(f"Failed to read {filepath}: {e}", path=str(filepath)) from e


async def upload_file(connection: BaseStorageConnection, digest: str, filepath: str | Path) -> str:
    """
    Upload a file in a single put request.

    The whole file is buffered in memory before the put.

    Returns:
        URI of the stored object

    Raises:
        LocalIOError: If the file cannot be read
        RemoteError: If the put fails
    """
    key = object_key_for(digest, filepath)
    body = await read_file(filepath)
    uri = await asyncio.to_thread(connection.put_object, key, body)
    logger.debug(f"Uploaded {filepath} -> {uri} ({len(body)} bytes)")
    return uri
