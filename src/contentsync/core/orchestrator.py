"""
End-to-end sync flow.

1. Concurrently: list the bucket (remote digest index) and discover + hash
   local files (local digest index).
2. Diff the two indexes into an upload plan.
3. Dry run: report the count. Otherwise upload the plan through the bounded
   dispatcher.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable

from contentsync.config.loader import SyncSettings
from contentsync.connections.storage import BaseStorageConnection
from contentsync.core.catalog import build_remote_index
from contentsync.core.discovery import discover_files
from contentsync.core.dispatcher import BoundedDispatcher
from contentsync.core.planner import UploadPlan, plan_uploads
from contentsync.core.types import ProgressEvent, SyncSummary, WorkItem
from contentsync.core.uploader import upload_file
from contentsync.utils.display import Display
from contentsync.utils.hashing import DEFAULT_ALGORITHM, calculate_file_hash_async
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.core.orchestrator")


class SyncOrchestrator:
    """
    Orchestrates one sync run.

    The two dispatcher runs (hashing, uploading) are sequenced; the remote
    listing runs alongside hashing since they share no state.
    """

    def __init__(
        self,
        settings: SyncSettings,
        connection: BaseStorageConnection,
        display: Display | None = None,
        hash_algorithm: str = DEFAULT_ALGORITHM,
    ):
        """
        Initialize SyncOrchestrator.

        Args:
            settings: Run settings (glob, bucket, limits, dry run)
            connection: Storage connection for the target bucket
            display: Display for progress/summary output (default: enabled Display)
            hash_algorithm: Digest algorithm; must match the store's checksum
        """
        self.settings = settings
        self.connection = connection
        self.display = display if display is not None else Display()
        self.hash_algorithm = hash_algorithm
        self.summary = SyncSummary(dry_run=settings.dry_run)

    async def run(self) -> SyncSummary:
        """
        Execute the sync.

        Raises:
            RemoteError: If the remote listing fails (nothing is uploaded)
            LocalIOError: If local discovery fails (nothing is uploaded)
        """
        logger.debug(f"Syncing '{self.settings.search_glob}' -> bucket '{self.settings.bucket}'")

        remote_index, local_index = await _both(
            build_remote_index(self.connection),
            self.hash_local_files(),
        )

        self.summary.remote_count = len(remote_index)
        self.summary.local_count = len(local_index)
        self.display.print_found(self.summary.remote_count, self.summary.local_count)

        plan = plan_uploads(local_index, remote_index)
        self.summary.planned = len(plan)
        self.display.print_plan(len(plan), self.settings.dry_run)

        if self.settings.dry_run:
            logger.info(f"Dry run: {len(plan)} file(s) would be uploaded")
            return self.summary

        await self.upload(plan)
        self.display.print_summary(self.summary)
        return self.summary

    async def hash_local_files(self) -> dict[str, str]:
        """
        Discover local files and compute their digests.

        Files that cannot be read are logged and left out. When several files
        share content, the first one in discovery order is kept.

        Returns:
            Digest -> local path
        """
        files = await asyncio.to_thread(discover_files, self.settings.search_glob)
        backlog = [WorkItem(key=path) for path in files]

        async def hash_one(item: WorkItem) -> str:
            return await calculate_file_hash_async(Path(item.key), self.hash_algorithm)

        with self.display.phase("Computing digests", len(backlog)):
            dispatcher = BoundedDispatcher(self.settings.max_file_read, on_progress=self._progress_handler("hash"))
            results = await dispatcher.run(backlog, hash_one)

        index: dict[str, str] = {}
        for path in files:
            result = results[path]
            if not result.ok:
                self.summary.hash_failures += 1
                continue
            if result.value in index:
                logger.debug(f"{path} has the same content as {index[result.value]}")
                continue
            index[result.value] = path
        return index

    async def upload(self, plan: UploadPlan) -> None:
        """Upload every planned digest; failures are logged and counted, not retried."""
        backlog = [WorkItem(key=digest, payload=path) for digest, path in plan.items()]

        async def upload_one(item: WorkItem) -> str:
            return await upload_file(self.connection, item.key, item.payload)

        with self.display.phase("Uploading", len(backlog)):
            dispatcher = BoundedDispatcher(self.settings.max_uploads, on_progress=self._progress_handler("upload"))
            results = await dispatcher.run(backlog, upload_one)

        for result in results.values():
            if result.ok:
                self.summary.uploaded += 1
                self.summary.uploaded_uris.append(result.value)
            else:
                self.summary.upload_failures += 1

    def _progress_handler(self, phase: str):
        def handle(event: ProgressEvent) -> None:
            if event.result is not None and not event.result.ok:
                logger.error(f"{phase} failed for {event.result.key}: {event.result.error}")
            self.display.on_progress(event)

        return handle


async def _both(first: Awaitable[Any], second: Awaitable[Any]) -> tuple[Any, Any]:
    """
    Await two coroutines concurrently.

    If either fails the other is cancelled and the error propagates.
    """
    tasks = [asyncio.ensure_future(first), asyncio.ensure_future(second)]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return results[0], results[1]


async def run_sync(
    settings: SyncSettings,
    connection: BaseStorageConnection,
    display: Display | None = None,
) -> SyncSummary:
    """Programmatic entry point: run one sync and return its summary."""
    return await SyncOrchestrator(settings, connection, display=display).run()
