"""
Dedup planner: decide which local content is missing remotely.
"""

from __future__ import annotations

from typing import Mapping

UploadPlan = dict[str, str]


def missing_digests(local_index: Mapping[str, str], remote_index: Mapping[str, str]) -> set[str]:
    """Digests present locally but absent remotely."""
    return set(local_index) - set(remote_index)


def plan_uploads(local_index: Mapping[str, str], remote_index: Mapping[str, str]) -> UploadPlan:
    """
    Build the upload plan: digest -> local path for every local-only digest.

    Pure function; the plan keeps the local index's iteration order so uploads
    start in discovery order.
    """
    remote = set(remote_index)
    return {digest: path for digest, path in local_index.items() if digest not in remote}
