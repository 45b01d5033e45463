"""
Configuration management: run settings and credentials loading.
"""

from contentsync.config.loader import SyncSettings, build_connection_config, load_credentials
from contentsync.config.resolver import resolve_config

__all__ = [
    "SyncSettings",
    "build_connection_config",
    "load_credentials",
    "resolve_config",
]
