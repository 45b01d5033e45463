"""
Core sync pipeline: dispatcher, catalog, planner, uploader, orchestrator.
"""

from contentsync.core.dispatcher import BoundedDispatcher, run_bounded
from contentsync.core.planner import UploadPlan, missing_digests, plan_uploads
from contentsync.core.types import JobResult, ProgressEvent, RemoteObject, SyncSummary, WorkItem

__all__ = [
    "BoundedDispatcher",
    "run_bounded",
    "UploadPlan",
    "missing_digests",
    "plan_uploads",
    "JobResult",
    "ProgressEvent",
    "RemoteObject",
    "SyncSummary",
    "WorkItem",
]
