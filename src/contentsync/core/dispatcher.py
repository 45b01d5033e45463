"""
Bounded job dispatcher.

Runs an ordered backlog of WorkItems through an async task function with at
most `limit` tasks in flight. Each completion frees one slot, which is refilled
with the next never-started item from the backlog. Used for both the hashing
and the upload phase.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Hashable, Sequence

from contentsync.core.types import JobResult, ProgressEvent, WorkItem
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.core.dispatcher")

TaskFunc = Callable[[WorkItem], Awaitable[Any]]
ProgressCallback = Callable[[ProgressEvent], Any]


class BoundedDispatcher:
    """
    Concurrency-limited scheduler with dynamic refill.

    All bookkeeping (active set, next-unstarted cursor, completed count) is
    owned by the single `run` coroutine and only touched between awaits, so
    no locking is needed.
    """

    def __init__(self, limit: int, on_progress: ProgressCallback | None = None):
        """
        Initialize BoundedDispatcher.

        Args:
            limit: Maximum number of concurrently running tasks (N >= 1)
            on_progress: Optional sync or async callback invoked with a
                ProgressEvent after each completion and once when drained
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.limit = limit
        self.on_progress = on_progress
        self._active: dict[asyncio.Task, WorkItem] = {}
        self.max_active_seen = 0

    @property
    def active_count(self) -> int:
        return len(self._active)

    async def run(self, backlog: Sequence[WorkItem], task: TaskFunc) -> dict[Hashable, JobResult[Any]]:
        """
        Drain the backlog and return one JobResult per WorkItem key.

        Task exceptions are captured as failure results; they never stop the
        dispatcher or sibling tasks.

        Args:
            backlog: Ordered WorkItems; order defines start order only
            task: Async function run once per WorkItem

        Returns:
            Mapping of WorkItem key to JobResult
        """
        items = list(backlog)
        total = len(items)
        position = {item.key: index for index, item in enumerate(items)}
        if len(position) != total:
            raise ValueError("Backlog contains duplicate work item keys")

        results: dict[Hashable, JobResult[Any]] = {}
        completed = 0
        next_index = 0

        try:
            # Kick start the first window
            while next_index < min(self.limit, total):
                self._start(items[next_index], task)
                next_index += 1

            while self._active:
                done, _ = await asyncio.wait(self._active.keys(), return_when=asyncio.FIRST_COMPLETED)

                # Process in start order so event ordering is deterministic within one wakeup
                for finished in sorted(done, key=lambda t: position[self._active[t].key]):
                    item = self._active.pop(finished)
                    result = self._collect(item, finished)
                    results[item.key] = result
                    completed += 1
                    await self._emit(ProgressEvent(completed=completed, total=total, result=result))

                    if next_index < total:
                        self._start(items[next_index], task)
                        next_index += 1
        except BaseException:
            # Interrupted (Ctrl+C / outer cancellation): don't leave orphaned tasks behind
            await self._cancel_active()
            raise

        await self._emit(ProgressEvent(completed=completed, total=total, finished=True))
        return results

    def _start(self, item: WorkItem, task: TaskFunc) -> None:
        running = asyncio.create_task(self._invoke(task, item))
        self._active[running] = item
        self.max_active_seen = max(self.max_active_seen, len(self._active))
        logger.debug(f"Started {item.key!r} ({len(self._active)}/{self.limit} active)")

    @staticmethod
    async def _invoke(task: TaskFunc, item: WorkItem) -> Any:
        return await task(item)

    def _collect(self, item: WorkItem, finished: asyncio.Task) -> JobResult[Any]:
        if finished.cancelled():
            return JobResult.failure(item.key, asyncio.CancelledError())
        error = finished.exception()
        if error is None:
            return JobResult.success(item.key, finished.result())
        if not isinstance(error, Exception):
            # KeyboardInterrupt/SystemExit raised inside a task must not be swallowed
            raise error
        logger.debug(f"Work item {item.key!r} failed: {error}")
        return JobResult.failure(item.key, error)

    async def _emit(self, event: ProgressEvent) -> None:
        if self.on_progress is None:
            return
        outcome = self.on_progress(event)
        if inspect.isawaitable(outcome):
            await outcome

    async def _cancel_active(self) -> None:
        pending = list(self._active)
        for running in pending:
            running.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._active.clear()


async def run_bounded(
    backlog: Sequence[WorkItem],
    limit: int,
    task: TaskFunc,
    on_progress: ProgressCallback | None = None,
) -> dict[Hashable, JobResult[Any]]:
    """Run `backlog` through `task` with at most `limit` in flight."""
    return await BoundedDispatcher(limit, on_progress=on_progress).run(backlog, task)
