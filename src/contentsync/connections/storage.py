"""
Storage connection base class.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseStorageConnection(ABC):
    """
    Base class for object storage connections.

    A storage connection knows its namespace (bucket/container) and exposes the
    two operations a content sync needs: paginated listing of objects with
    their checksums, and put-by-key. Subclasses implement both.
    """

    def __init__(self, name: str, config: dict[str, Any]):
        """
        Initialize storage connection.

        Args:
            name: Connection name (used in logs)
            config: Connection configuration dictionary
        """
        self.name = name
        self.config = config

    @property
    def base_path(self) -> str:
        """
        Get the key prefix for storage operations.

        Empty by default; keys are then written at the bucket root.
        """
        storage = self.config.get("config", {}).get("storage", {})
        return storage.get("base_path", "")  # type: ignore[no-any-return]

    @abstractmethod
    def list_objects_page(self, marker: str | None = None, *, max_keys: int = 1000) -> Any:
        """Return one `ListPage` of objects starting after `marker`."""
        pass

    @abstractmethod
    def put_object(self, key: str, body: bytes) -> str:
        """Store `body` under `key` and return the object URI."""
        pass

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name='{self.name}')"
