"""
Local file discovery via glob patterns.
"""

from __future__ import annotations

import glob
import os

from contentsync.exceptions import DiscoveryError
from contentsync.utils.logging import get_logger

logger = get_logger("contentsync.core.discovery")


def discover_files(search_glob: str) -> list[str]:
    """
    Return regular files matching `search_glob`, sorted for a stable backlog order.

    `**` matches across directories. Directories matched by the pattern are
    skipped.

    Raises:
        DiscoveryError: If the pattern cannot be evaluated
    """
    if not search_glob or not search_glob.strip():
        raise DiscoveryError("Search glob is empty", path=search_glob)

    try:
        matches = glob.glob(os.path.expanduser(search_glob), recursive=True)
    except (OSError, ValueError) as e:
        raise DiscoveryError(f"Could not evaluate glob '{search_glob}': {e}", path=search_glob) from e

    # several `**` segments can yield the same path more than once
    files = sorted({path for path in matches if os.path.isfile(path)})
    logger.debug(f"Glob '{search_glob}' matched {len(files)} file(s)")
    return files
