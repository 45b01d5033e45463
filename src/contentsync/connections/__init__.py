"""
Storage connections.
"""

from contentsync.connections.s3 import S3Connection, normalize_etag
from contentsync.connections.storage import BaseStorageConnection

__all__ = [
    "BaseStorageConnection",
    "S3Connection",
    "normalize_etag",
]
