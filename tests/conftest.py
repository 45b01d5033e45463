"""
Shared fixtures: an in-memory storage connection standing in for S3.
"""

import hashlib
import threading

import pytest

from contentsync.connections.storage import BaseStorageConnection
from contentsync.core.types import ListPage, RemoteObject
from contentsync.exceptions import RemoteError


class FakeStorageConnection(BaseStorageConnection):
    """Serves canned listing pages and records puts."""

    def __init__(self, pages=None, *, fail_list_on_page=None, fail_put_keys=()):
        super().__init__("fake", {"config": {"bucket": "test-bucket"}})
        self.pages = pages if pages is not None else [ListPage(items=[], truncated=False)]
        self.fail_list_on_page = fail_list_on_page
        self.fail_put_keys = set(fail_put_keys)
        self.list_calls = []
        self.puts = []
        self._lock = threading.Lock()

    @property
    def bucket(self):
        return "test-bucket"

    def list_objects_page(self, marker=None, *, max_keys=1000):
        index = len(self.list_calls)
        self.list_calls.append(marker)
        if self.fail_list_on_page == index:
            raise RemoteError("listing exploded", bucket=self.bucket, operation="list_objects")
        return self.pages[index]

    def put_object(self, key, body):
        if key in self.fail_put_keys:
            raise RemoteError(f"put rejected for {key}", bucket=self.bucket, key=key, operation="put_object")
        with self._lock:
            self.puts.append((key, body))
        return f"s3://{self.bucket}/{key}"


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


@pytest.fixture
def fake_connection():
    return FakeStorageConnection()


@pytest.fixture
def remote_with():
    """Build a single-page fake connection from (id, digest) pairs."""

    def _build(*pairs, **kwargs):
        items = [RemoteObject(id=obj_id, digest=digest) for obj_id, digest in pairs]
        return FakeStorageConnection([ListPage(items=items, truncated=False)], **kwargs)

    return _build
