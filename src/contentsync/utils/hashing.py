"""
File hashing utilities for content addressing.

Digests are computed by streaming file content through hashlib, never by
loading a whole file at once. MD5 is the default because it is what S3
reports as the ETag of a single-part object.
"""

import hashlib
from pathlib import Path

import aiofiles

from contentsync.exceptions import LocalIOError
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.utils.hashing")

DEFAULT_ALGORITHM = "md5"
CHUNK_SIZE = 64 * 1024


def _new_hasher(algorithm: str) -> "hashlib._Hash":
    try:
        return hashlib.new(algorithm)
    except ValueError as e:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}") from e


def calculate_file_hash(file_path: str | Path, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Calculate the hex digest of file content (synchronous).

    Args:
        file_path: Path to file
        algorithm: hashlib algorithm name

    Returns:
        Hex digest string

    Raises:
        LocalIOError: If the file cannot be opened or read
    """
    hasher = _new_hasher(algorithm)
    try:
        with open(file_path, "rb") as f:
            for block in iter(lambda: f.read(CHUNK_SIZE), b""):
                hasher.update(block)
    except OSError as e:
        raise LocalIOError(f"Failed to read {file_path}: {e}", path=str(file_path)) from e
    return hasher.hexdigest()


async def calculate_file_hash_async(
    file_path: str | Path,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """
    Calculate the hex digest of file content (async).

    Uses aiofiles for non-blocking file I/O so several files can be hashed
    concurrently on one event loop.

    Args:
        file_path: Path to file
        algorithm: hashlib algorithm name
        chunk_size: Bytes per read

    Returns:
        Hex digest string

    Raises:
        LocalIOError: If the file cannot be opened or a read fails mid-stream
    """
    hasher = _new_hasher(algorithm)
    try:
        async with aiofiles.open(file_path, "rb") as f:
            while True:
                chunk = await f.read(chunk_size)
                if not chunk:
                    break
                hasher.update(chunk)
    except OSError as e:
        raise LocalIOError(f"Failed to read {file_path}: {e}", path=str(file_path)) from e

    digest = hasher.hexdigest()
    logger.debug(f"{algorithm} {digest} {file_path}")
    return digest
