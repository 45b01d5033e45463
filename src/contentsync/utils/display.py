"""
Display manager for a sync run.

Renders:
- one progress line per dispatched phase (hashing, uploading), advanced on
  every completed work item and closed with a newline when the phase drains
- the "Found" summary and the dry-run / upload counts
- a list of per-item errors at the end of a phase
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn

from contentsync.core.types import ProgressEvent, SyncSummary


class Display:
    """
    Manages console output for a sync run.

    Progress goes to stdout; logs go to stderr via the logging handler, so the
    two streams never interleave mid-line.
    """

    def __init__(self, console: Console | None = None, enabled: bool = True, max_errors: int = 20):
        """
        Initialize display manager.

        Args:
            console: Rich Console instance (creates new if None)
            enabled: Whether to render anything (default: True)
            max_errors: Maximum number of item errors listed per phase
        """
        self.enabled = enabled
        self.console = console if console is not None else Console()
        self.max_errors = max_errors
        self.progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._errors: dict[str, str] = {}
        self.last_event: ProgressEvent | None = None

    @contextmanager
    def phase(self, description: str, total: int) -> Iterator["Display"]:
        """
        Show a progress line for one dispatcher run.

        Feed it with `on_progress`; the line is finalised (newline) on exit.
        """
        self._errors = {}
        self.last_event = None
        if self.enabled:
            self.progress = Progress(
                TextColumn("[bold]{task.description}"),
                BarColumn(),
                TextColumn("{task.percentage:>5.1f}%"),
                MofNCompleteColumn(),
                console=self.console,
                transient=False,
            )
            self._task_id = self.progress.add_task(description, total=total or 1, completed=0 if total else 1)
            self.progress.start()
        try:
            yield self
        finally:
            if self.progress is not None:
                self.progress.stop()
                self.progress = None
                self._task_id = None
            self.print_errors()

    def on_progress(self, event: ProgressEvent) -> None:
        """Dispatcher progress callback."""
        self.last_event = event
        if event.result is not None and not event.result.ok:
            self.add_error(str(event.result.key), str(event.result.error))
        if self.progress is not None and self._task_id is not None and event.total:
            self.progress.update(self._task_id, completed=event.completed)

    def add_error(self, key: str, message: str) -> None:
        self._errors[key] = message

    def print_errors(self) -> None:
        """Print item errors collected during the phase."""
        if not self.enabled or not self._errors:
            return
        self.console.print(f"[red]{len(self._errors)} item(s) failed:[/red]")
        for key, message in list(self._errors.items())[: self.max_errors]:
            self.console.print(f"  [red]✗[/red] {escape(key)}: {escape(message)}", highlight=False)
        hidden = len(self._errors) - self.max_errors
        if hidden > 0:
            self.console.print(f"  ... and {hidden} more")

    def print_found(self, remote_count: int, local_count: int) -> None:
        self.print("Found")
        self.print(f" - Files Remote: {remote_count}")
        self.print(f" - Files Local:  {local_count}")

    def print_plan(self, count: int, dry_run: bool) -> None:
        if dry_run:
            self.print(f"Would upload {count} files")
        else:
            self.print(f"Will upload: {count}")

    def print_summary(self, summary: SyncSummary) -> None:
        if summary.dry_run:
            return
        message = f"Uploaded {summary.uploaded} of {summary.planned} files"
        if summary.upload_failures:
            message += f" ([red]{summary.upload_failures} failed[/red])"
        self.print(message)

    def print(self, *objects: Any, **kwargs: Any) -> None:
        if self.enabled:
            self.console.print(*objects, highlight=False, **kwargs)
