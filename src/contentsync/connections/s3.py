"""
S3 connection for storage operations.

Provides a lazily created boto3 client for paginated listing and puts.
"""

from __future__ import annotations

from typing import Any, Optional

from contentsync.connections.storage import BaseStorageConnection
from contentsync.core.types import ListPage, RemoteObject
from contentsync.exceptions import RemoteError
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.connections.s3")


def normalize_etag(etag: str | None) -> str:
    """Strip the surrounding quote characters S3 puts around ETag values."""
    if not etag:
        return ""
    return etag.strip().strip('"')


class S3Connection(BaseStorageConnection):
    """
    S3 connection wrapper for storage operations.

    Supports AWS credentials from config, environment, or IAM role.

    Config example:
        {
          "config": {
            "bucket": "my-bucket",
            "region": "us-east-1",
            "access_key_id": "AKIA...",     # Optional, uses env/IAM if not set
            "secret_access_key": "...",     # Optional
            "session_token": "...",         # Optional (for temp creds)
            "endpoint_url": "...",          # Optional (for S3-compatible services)
            "max_pool_connections": 11,     # Optional HTTP connection pool size
            "storage": {"base_path": "..."} # Optional prefix for all operations
          }
        }
    """

    def __init__(self, name: str, config: dict[str, Any]):
        super().__init__(name, config)
        self._client = None
        bucket_name = self._cfg.get("bucket", "")
        if not bucket_name:
            raise ValueError(f"S3 connection '{name}' requires 'bucket' in config.")

    @property
    def bucket(self) -> str:
        """Get S3 bucket name from config."""
        return self._cfg["bucket"]  # type: ignore[no-any-return]

    @property
    def region(self) -> Optional[str]:
        """Get AWS region from config."""
        return self._cfg.get("region")

    @property
    def endpoint_url(self) -> Optional[str]:
        """Get custom endpoint URL (for S3-compatible services like MinIO)."""
        return self._cfg.get("endpoint_url")

    @property
    def max_pool_connections(self) -> Optional[int]:
        value = self._cfg.get("max_pool_connections")
        return int(value) if value is not None else None

    @property
    def _cfg(self) -> dict[str, Any]:
        """Get nested config dict."""
        return self.config.get("config", {})  # type: ignore[no-any-return]

    def _get_client_kwargs(self) -> dict[str, Any]:
        """Build kwargs for boto3 client initialization."""
        kwargs: dict[str, Any] = {}

        if self.region:
            kwargs["region_name"] = self.region

        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url

        # Explicit credentials from config (override env/IAM)
        access_key = self._cfg.get("access_key_id")
        secret_key = self._cfg.get("secret_access_key")
        session_token = self._cfg.get("session_token")

        if access_key and secret_key:
            kwargs["aws_access_key_id"] = access_key
            kwargs["aws_secret_access_key"] = secret_key
            if session_token:
                kwargs["aws_session_token"] = session_token

        if self.max_pool_connections:
            from botocore.config import Config as BotoConfig

            kwargs["config"] = BotoConfig(max_pool_connections=self.max_pool_connections)

        return kwargs

    @property
    def client(self):
        """
        Get boto3 S3 client (lazy initialization).

        boto3 clients are thread-safe, so one client serves every worker thread.

        Returns:
            boto3.client('s3') instance
        """
        if self._client is None:
            import boto3

            self._client = boto3.client("s3", **self._get_client_kwargs())
        return self._client

    def _full_key(self, key: str) -> str:
        """Prepend base_path to key if configured."""
        if self.base_path:
            return f"{self.base_path.strip('/')}/{key.lstrip('/')}"
        return key.lstrip("/")

    def list_objects_page(self, marker: str | None = None, *, max_keys: int = 1000) -> ListPage:
        """
        Fetch one page of the bucket listing.

        Args:
            marker: Key to start listing after (the last key of the previous page)
            max_keys: Maximum number of keys per page

        Returns:
            ListPage with the page's objects and whether more pages follow

        Raises:
            RemoteError: If the list request fails
        """
        params: dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": max_keys}
        if self.base_path:
            params["Prefix"] = f"{self.base_path.strip('/')}/"
        if marker is not None:
            params["Marker"] = marker

        try:
            response = self.client.list_objects(**params)
        except Exception as e:
            raise RemoteError(
                f"Listing bucket '{self.bucket}' failed: {e}",
                bucket=self.bucket,
                key=marker,
                operation="list_objects",
            ) from e

        items = [
            RemoteObject(id=obj["Key"], digest=normalize_etag(obj.get("ETag")))
            for obj in response.get("Contents", [])
        ]
        return ListPage(items=items, truncated=bool(response.get("IsTruncated", False)))

    def put_object(self, key: str, body: bytes) -> str:
        """
        Put object content in a single request.

        Args:
            key: S3 object key (base_path is prepended automatically)
            body: Object content

        Returns:
            S3 URI of uploaded object

        Raises:
            RemoteError: If the put request fails
        """
        full_key = self._full_key(key)
        try:
            self.client.put_object(Bucket=self.bucket, Key=full_key, Body=body)
        except Exception as e:
            raise RemoteError(
                f"Uploading s3://{self.bucket}/{full_key} failed: {e}",
                bucket=self.bucket,
                key=full_key,
                operation="put_object",
            ) from e
        return f"s3://{self.bucket}/{full_key}"

    def close(self) -> None:
        """Drop the client; a new one is created on next use."""
        self._client = None

    def __enter__(self) -> "S3Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
