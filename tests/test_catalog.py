"""
Tests for the remote catalog builder.
"""

import pytest

from contentsync.core.catalog import build_remote_index, index_by_digest, list_all
from contentsync.core.types import ListPage, RemoteObject
from contentsync.exceptions import RemoteError

from conftest import FakeStorageConnection


def page(*pairs, truncated=False):
    return ListPage(items=[RemoteObject(id=i, digest=d) for i, d in pairs], truncated=truncated)


class TestListAll:
    @pytest.mark.asyncio
    async def test_single_page(self):
        conn = FakeStorageConnection([page(("r1", "d1"), ("r2", "d2"))])

        objects = await list_all(conn)

        assert [o.id for o in objects] == ["r1", "r2"]
        assert conn.list_calls == [None]

    @pytest.mark.asyncio
    async def test_truncated_pages_concatenated_in_order(self):
        conn = FakeStorageConnection(
            [
                page(("a", "d1"), ("b", "d2"), truncated=True),
                page(("c", "d3"), truncated=False),
            ]
        )

        objects = await list_all(conn)

        assert objects == [RemoteObject("a", "d1"), RemoteObject("b", "d2"), RemoteObject("c", "d3")]
        # Second request continues after the last key of the first page
        assert conn.list_calls == [None, "b"]

    @pytest.mark.asyncio
    async def test_empty_bucket(self):
        conn = FakeStorageConnection([page()])
        assert await list_all(conn) == []

    @pytest.mark.asyncio
    async def test_failure_on_later_page_fails_whole_listing(self):
        conn = FakeStorageConnection(
            [page(("a", "d1"), truncated=True), page(("b", "d2"))],
            fail_list_on_page=1,
        )

        with pytest.raises(RemoteError, match="listing exploded"):
            await list_all(conn)

    @pytest.mark.asyncio
    async def test_truncated_empty_page_is_an_error(self):
        conn = FakeStorageConnection([page(truncated=True)])

        with pytest.raises(RemoteError, match="empty page"):
            await list_all(conn)


class TestIndexByDigest:
    def test_maps_digest_to_id(self):
        index = index_by_digest([RemoteObject("r1", "d1"), RemoteObject("r2", "d2")])
        assert index == {"d1": "r1", "d2": "r2"}

    def test_first_object_wins_for_shared_content(self):
        index = index_by_digest([RemoteObject("r1", "d1"), RemoteObject("r1-copy", "d1")])
        assert index == {"d1": "r1"}

    def test_objects_without_digest_skipped(self):
        assert index_by_digest([RemoteObject("r1", "")]) == {}

    @pytest.mark.asyncio
    async def test_build_remote_index(self, remote_with):
        conn = remote_with(("r1", "d1"))
        assert await build_remote_index(conn) == {"d1": "r1"}
