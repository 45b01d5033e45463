"""
Type definitions shared by the sync pipelines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Hashable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class WorkItem:
    """
    A unit of work handed to the dispatcher.

    `key` identifies the item in the result mapping; `payload` is whatever the
    task function needs (a filepath for hashing, a filepath for an upload
    keyed by digest).
    """

    key: Hashable
    payload: Any = None


@dataclass(frozen=True)
class JobResult(Generic[T]):
    """Outcome of exactly one WorkItem: a value or a captured exception."""

    key: Hashable
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, key: Hashable, value: T) -> "JobResult[T]":
        return cls(key=key, value=value)

    @classmethod
    def failure(cls, key: Hashable, error: BaseException) -> "JobResult[T]":
        return cls(key=key, error=error)


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted by the dispatcher after each completion and once when drained."""

    completed: int
    total: int
    result: JobResult[Any] | None = None
    finished: bool = False

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return self.completed / self.total

    @property
    def percent(self) -> float:
        return self.fraction * 100


@dataclass(frozen=True)
class RemoteObject:
    """Remote object identity plus its content digest (quotes stripped)."""

    id: str
    digest: str


@dataclass(frozen=True)
class ListPage:
    """One page of a remote listing."""

    items: list[RemoteObject]
    truncated: bool


@dataclass
class SyncSummary:
    """Counts reported at the end of a run."""

    remote_count: int = 0
    local_count: int = 0
    planned: int = 0
    uploaded: int = 0
    upload_failures: int = 0
    hash_failures: int = 0
    dry_run: bool = False
    uploaded_uris: list[str] = field(default_factory=list)
