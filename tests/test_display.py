"""
Tests for console display.
"""

import io

from rich.console import Console

from contentsync.core.types import JobResult, ProgressEvent, SyncSummary
from contentsync.utils.display import Display


def make_display(**kwargs):
    buffer = io.StringIO()
    return Display(console=Console(file=buffer, width=120, force_terminal=False), **kwargs), buffer


class TestPhase:
    def test_tracks_last_event_and_lists_errors(self):
        display, buffer = make_display()

        with display.phase("Uploading", 2):
            display.on_progress(ProgressEvent(1, 2, JobResult.success("d1", "s3://b/d1.txt")))
            display.on_progress(ProgressEvent(2, 2, JobResult.failure("d2", OSError("[Errno 13] denied"))))
            display.on_progress(ProgressEvent(2, 2, finished=True))

        assert display.last_event.finished is True
        assert display.progress is None
        output = buffer.getvalue()
        assert "1 item(s) failed" in output
        assert "d2: [Errno 13] denied" in output

    def test_errors_reset_between_phases(self):
        display, buffer = make_display()
        with display.phase("Computing digests", 1):
            display.on_progress(ProgressEvent(1, 1, JobResult.failure("a.txt", OSError("bad"))))
        with display.phase("Uploading", 0):
            pass
        assert buffer.getvalue().count("item(s) failed") == 1

    def test_disabled_display_prints_nothing(self):
        display, buffer = make_display(enabled=False)
        with display.phase("Uploading", 1):
            display.on_progress(ProgressEvent(1, 1, JobResult.failure("k", OSError("x"))))
        display.print_found(1, 2)
        assert buffer.getvalue() == ""
        assert display.last_event.completed == 1


class TestSummaryLines:
    def test_found_and_plan(self):
        display, buffer = make_display()
        display.print_found(5, 7)
        display.print_plan(2, dry_run=False)
        output = buffer.getvalue()
        assert "Files Remote: 5" in output
        assert "Files Local:  7" in output
        assert "Will upload: 2" in output

    def test_summary_skipped_for_dry_run(self):
        display, buffer = make_display()
        display.print_summary(SyncSummary(dry_run=True, planned=3))
        assert buffer.getvalue() == ""

    def test_summary_with_failures(self):
        display, buffer = make_display()
        display.print_summary(SyncSummary(planned=3, uploaded=2, upload_failures=1))
        assert "Uploaded 2 of 3 files (1 failed)" in buffer.getvalue()


def test_progress_event_percent():
    assert ProgressEvent(1, 4).percent == 25.0
    assert ProgressEvent(0, 0, finished=True).fraction == 1.0
