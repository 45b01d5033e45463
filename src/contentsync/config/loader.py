"""
Run settings and credentials file loading.

Credentials are read once at startup from a YAML (or JSON) file such as::

    {"accessKeyId": "AKIA...", "secretAccessKey": "...", "region": "us-east-1"}

Values may reference environment variables with ${VAR_NAME}.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from contentsync.config.resolver import resolve_config
from contentsync.exceptions import ConfigurationError

DEFAULT_CREDENTIALS_PATH = Path("aws.json")
DEFAULT_MAX_UPLOADS = 10
DEFAULT_MAX_FILE_READ = 2

# credentials-file key -> S3Connection config key
_CREDENTIAL_KEYS = {
    "accessKeyId": "access_key_id",
    "access_key_id": "access_key_id",
    "secretAccessKey": "secret_access_key",
    "secret_access_key": "secret_access_key",
    "sessionToken": "session_token",
    "session_token": "session_token",
    "region": "region",
    "endpoint_url": "endpoint_url",
    "endpointUrl": "endpoint_url",
}


@dataclass(frozen=True)
class SyncSettings:
    """Options for one sync run."""

    search_glob: str
    bucket: str
    dry_run: bool = False
    max_uploads: int = DEFAULT_MAX_UPLOADS
    max_file_read: int = DEFAULT_MAX_FILE_READ
    credentials_path: Path | None = None

    @classmethod
    def from_options(
        cls,
        *,
        search_glob: str | None,
        bucket: str | None,
        dry_run: bool = False,
        max_uploads: int = DEFAULT_MAX_UPLOADS,
        max_file_read: int = DEFAULT_MAX_FILE_READ,
        credentials_path: Path | None = None,
    ) -> "SyncSettings":
        """
        Build settings from raw CLI options, failing fast on anything missing.

        Raises:
            ConfigurationError: If a required option is missing or a limit is invalid
        """
        errors = []
        if not search_glob:
            errors.append("Missing required option '--search-glob'")
        if not bucket:
            errors.append("Missing required option '--bucket'")
        if max_uploads < 1:
            errors.append(f"'--max-uploads' must be >= 1, got {max_uploads}")
        if max_file_read < 1:
            errors.append(f"'--max-file-read' must be >= 1, got {max_file_read}")
        if errors:
            raise ConfigurationError("\n".join(errors))

        return cls(
            search_glob=search_glob,  # type: ignore[arg-type]
            bucket=bucket,  # type: ignore[arg-type]
            dry_run=dry_run,
            max_uploads=max_uploads,
            max_file_read=max_file_read,
            credentials_path=credentials_path,
        )


def load_credentials(path: Path | None = None) -> dict[str, Any]:
    """
    Load credentials for the object store.

    With no explicit path the default file is optional: when it does not
    exist an empty dict is returned and boto3 falls back to its environment /
    IAM credential chain. An explicit path must exist.

    Args:
        path: Credentials file path (default: ./aws.json, optional)

    Returns:
        Dict with S3Connection config keys (access_key_id, region, ...)

    Raises:
        ConfigurationError: If the file is missing (explicit path), unreadable or malformed
    """
    explicit = path is not None
    path = Path(path) if path is not None else DEFAULT_CREDENTIALS_PATH

    if not path.exists():
        if explicit:
            raise ConfigurationError(
                f"Credentials file not found: {path}\n"
                f"  Suggestion: Pass --credentials pointing at a JSON/YAML file with accessKeyId/secretAccessKey"
            )
        return {}

    if not path.is_file():
        raise ConfigurationError(f"Credentials path is not a file: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        if hasattr(e, "problem_mark"):
            mark = e.problem_mark
            raise ConfigurationError(
                f"Error parsing {path} at line {mark.line + 1}, column {mark.column + 1}:\n  {e}"
            ) from e
        raise ConfigurationError(f"Error parsing {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read credentials file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Credentials file must contain a mapping, got {type(data).__name__}: {path}"
        )

    data = resolve_config(data)
    credentials: dict[str, Any] = {}
    for key, value in data.items():
        target = _CREDENTIAL_KEYS.get(key)
        if target and value not in (None, ""):
            credentials[target] = value
    return credentials


def build_connection_config(
    settings: SyncSettings,
    credentials: dict[str, Any],
    *,
    max_pool_connections: int | None = None,
) -> dict[str, Any]:
    """Build the config dict an S3Connection is created from."""
    cfg: dict[str, Any] = {"bucket": settings.bucket, **credentials}
    if max_pool_connections is not None:
        cfg["max_pool_connections"] = max_pool_connections
    return {"type": "s3", "config": cfg}
