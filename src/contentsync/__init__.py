"""
contentsync - upload a local file set to S3 by content, skipping anything
whose digest already exists in the bucket.
"""

__version__ = "0.1.0"

from contentsync.config.loader import SyncSettings, load_credentials
from contentsync.connections.s3 import S3Connection
from contentsync.core.dispatcher import BoundedDispatcher, run_bounded
from contentsync.core.orchestrator import SyncOrchestrator, run_sync
from contentsync.core.planner import plan_uploads
from contentsync.core.types import JobResult, ProgressEvent, SyncSummary, WorkItem

# Exceptions
from contentsync.exceptions import (
    ConfigurationError,
    ContentSyncError,
    DiscoveryError,
    LocalIOError,
    RemoteError,
)

# Logging utilities
from contentsync.utils.logging import get_logger, setup_logging

__all__ = [
    # Settings
    "SyncSettings",
    "load_credentials",
    # Execution
    "S3Connection",
    "SyncOrchestrator",
    "run_sync",
    "BoundedDispatcher",
    "run_bounded",
    "plan_uploads",
    "JobResult",
    "ProgressEvent",
    "SyncSummary",
    "WorkItem",
    # Logging
    "setup_logging",
    "get_logger",
    # Exceptions
    "ContentSyncError",
    "ConfigurationError",
    "LocalIOError",
    "DiscoveryError",
    "RemoteError",
]
