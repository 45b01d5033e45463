"""
Remote catalog: enumerate every object in the bucket and index it by digest.
"""

from __future__ import annotations

import asyncio

from contentsync.connections.storage import BaseStorageConnection
from contentsync.core.types import RemoteObject
from contentsync.exceptions import RemoteError
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.core.catalog")


async def list_all(connection: BaseStorageConnection, *, page_size: int = 1000) -> list[RemoteObject]:
    """
    List every object in the connection's bucket, in listing order.

    Pages are fetched one after another, each starting after the last key of
    the previous page, until a page reports it is not truncated. Any failed
    page fails the whole listing; a partial catalog is never returned.

    Raises:
        RemoteError: If any page request fails
    """
    objects: list[RemoteObject] = []
    marker: str | None = None
    pages = 0

    while True:
        page = await asyncio.to_thread(connection.list_objects_page, marker, max_keys=page_size)
        pages += 1
        objects.extend(page.items)

        if not page.truncated:
            break
        if not page.items:
            raise RemoteError(
                "Listing reported more results but returned an empty page",
                key=marker,
                operation="list_objects",
            )
        marker = page.items[-1].id

    logger.debug(f"Listed {len(objects)} remote objects in {pages} page(s)")
    return objects


def index_by_digest(objects: list[RemoteObject]) -> dict[str, str]:
    """Map digest -> object id. When several objects share content the first listed wins."""
    index: dict[str, str] = {}
    for obj in objects:
        if not obj.digest:
            continue
        index.setdefault(obj.digest, obj.id)
    return index


async def build_remote_index(connection: BaseStorageConnection, *, page_size: int = 1000) -> dict[str, str]:
    """List the bucket and return its digest index."""
    return index_by_digest(await list_all(connection, page_size=page_size))
