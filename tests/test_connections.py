"""
Tests for storage connections.
"""

from unittest.mock import MagicMock, patch

import pytest

from contentsync.connections.s3 import S3Connection, normalize_etag
from contentsync.connections.storage import BaseStorageConnection
from contentsync.core.types import RemoteObject
from contentsync.exceptions import RemoteError


class TestNormalizeEtag:
    def test_strips_quotes(self):
        assert normalize_etag('"d41d8cd98f00b204e9800998ecf8427e"') == "d41d8cd98f00b204e9800998ecf8427e"

    def test_unquoted_passthrough(self):
        assert normalize_etag("abc") == "abc"

    def test_empty(self):
        assert normalize_etag(None) == ""
        assert normalize_etag("") == ""


class ListOnlyConnection(BaseStorageConnection):
    def list_objects_page(self, marker=None, *, max_keys=1000):
        return None


class MemoryConnection(ListOnlyConnection):
    def put_object(self, key, body):
        return f"mem://{key}"


class TestBaseStorageConnection:
    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            BaseStorageConnection("base", {})

    def test_subclass_missing_put_fails_at_construction(self):
        with pytest.raises(TypeError, match="put_object"):
            ListOnlyConnection("partial", {})

    def test_complete_subclass(self):
        conn = MemoryConnection("mem", {})
        assert conn.put_object("k", b"") == "mem://k"
        assert conn.base_path == ""

    def test_repr(self):
        assert repr(MemoryConnection("base", {})) == "MemoryConnection(name='base')"


class TestS3Connection:
    """Tests for S3Connection."""

    def test_requires_bucket(self):
        with pytest.raises(ValueError, match="requires 'bucket'"):
            S3Connection("test", {"config": {}})

    def test_bucket_and_region(self):
        conn = S3Connection("test", {"config": {"bucket": "my-bucket", "region": "us-west-2"}})
        assert conn.bucket == "my-bucket"
        assert conn.region == "us-west-2"

    def test_full_key_with_base_path(self):
        conn = S3Connection("test", {"config": {"bucket": "b", "storage": {"base_path": "prefix"}}})
        assert conn._full_key("file.txt") == "prefix/file.txt"
        assert conn._full_key("/file.txt") == "prefix/file.txt"

    def test_client_lazy_initialization(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        assert conn._client is None

        with patch("boto3.client") as mock_boto:
            mock_boto.return_value = MagicMock()
            _ = conn.client
            _ = conn.client
            mock_boto.assert_called_once_with("s3")

    def test_client_with_credentials_and_pool_size(self):
        conn = S3Connection(
            "test",
            {
                "config": {
                    "bucket": "b",
                    "region": "eu-west-1",
                    "access_key_id": "AKIATEST",
                    "secret_access_key": "secret123",
                    "max_pool_connections": 11,
                }
            },
        )

        with patch("boto3.client") as mock_boto:
            _ = conn.client
            args, kwargs = mock_boto.call_args
            assert args == ("s3",)
            assert kwargs["region_name"] == "eu-west-1"
            assert kwargs["aws_access_key_id"] == "AKIATEST"
            assert kwargs["aws_secret_access_key"] == "secret123"
            assert "aws_session_token" not in kwargs
            assert kwargs["config"].max_pool_connections == 11

    def test_list_objects_page(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()
        conn._client.list_objects.return_value = {
            "Contents": [
                {"Key": "aaa.txt", "ETag": '"aaa"'},
                {"Key": "bbb.jpg", "ETag": '"bbb"'},
            ],
            "IsTruncated": True,
        }

        page = conn.list_objects_page("prev-key", max_keys=2)

        conn._client.list_objects.assert_called_once_with(Bucket="b", MaxKeys=2, Marker="prev-key")
        assert page.items == [RemoteObject("aaa.txt", "aaa"), RemoteObject("bbb.jpg", "bbb")]
        assert page.truncated is True

    def test_list_objects_first_page_has_no_marker(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()
        conn._client.list_objects.return_value = {}

        page = conn.list_objects_page()

        conn._client.list_objects.assert_called_once_with(Bucket="b", MaxKeys=1000)
        assert page.items == []
        assert page.truncated is False

    def test_list_objects_failure_raises_remote_error(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()
        conn._client.list_objects.side_effect = Exception("AccessDenied")

        with pytest.raises(RemoteError, match="AccessDenied") as exc_info:
            conn.list_objects_page()
        assert exc_info.value.operation == "list_objects"
        assert exc_info.value.bucket == "b"

    def test_put_object(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()

        uri = conn.put_object("d2.txt", b"content")

        conn._client.put_object.assert_called_once_with(Bucket="b", Key="d2.txt", Body=b"content")
        assert uri == "s3://b/d2.txt"

    def test_put_object_failure_raises_remote_error(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()
        conn._client.put_object.side_effect = Exception("SlowDown")

        with pytest.raises(RemoteError) as exc_info:
            conn.put_object("d2.txt", b"content")
        assert exc_info.value.key == "d2.txt"
        assert exc_info.value.operation == "put_object"

    def test_context_manager_resets_client(self):
        conn = S3Connection("test", {"config": {"bucket": "b"}})
        conn._client = MagicMock()
        with conn as entered:
            assert entered is conn
        assert conn._client is None
