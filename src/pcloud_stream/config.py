# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration dataclass for pcloud-stream.

PCloudConfig is the single entry point for client configuration: where the
API lives, how to authenticate, and the default stream-file policies that
RemoteFile falls back to when not overridden per handle.

Configuration via environment variables (see pcloud_config_from_env):
    PCLOUD_BASE_URL: API base URL (default: https://api.pcloud.com)
    PCLOUD_TOKEN: Bearer token sent on every call
    PCLOUD_TIMEOUT: Per-call timeout in seconds (default: 30)
    PCLOUD_CHUNK_SIZE: Chunk size for the chunked write policy (default: 1 MiB)
    PCLOUD_WRITE_POLICY: "immediate" or "chunked" (default: immediate)
    PCLOUD_DELETE_REQUIRES_CLOSE: Fail delete when the implicit close fails

Usage:
    config = PCloudConfig(token="secret", write_policy="chunked")
    client = PCloudClient(config=config)

    # Or from environment
    client = PCloudClient(config=pcloud_config_from_env())
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.pcloud.com"
DEFAULT_CHUNK_SIZE = 1024 * 1024
WRITE_POLICIES = ("immediate", "chunked")


@dataclass
class PCloudConfig:
    """Client configuration.

    Top-Level Settings:
        base_url: pCloud API base URL
        token: Bearer token (no refresh logic, sent as-is)
        timeout: Default per-call timeout in seconds (None disables it)
        chunk_size: Flush threshold for the chunked write policy
        write_policy: Default RemoteFile write policy
        delete_requires_close: Make delete fail when its implicit close fails

    Example:
        config = PCloudConfig(
            token="secret",
            base_url="https://eapi.pcloud.com",
            chunk_size=4 * 1024 * 1024,
        )
    """

    base_url: str = DEFAULT_BASE_URL
    """pCloud API base URL. Trailing slashes are stripped."""

    token: str = ""
    """Bearer token sent in the Authorization header of every call."""

    timeout: float | None = 30.0
    """Default per-call timeout in seconds."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    """Chunk size in bytes for the chunked write policy (default 1 MiB)."""

    write_policy: str = "immediate"
    """Default write policy for RemoteFile: "immediate" or "chunked"."""

    delete_requires_close: bool = False
    """If True, RemoteFile.delete fails instead of proceeding when close fails."""

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or DEFAULT_BASE_URL).rstrip("/")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.write_policy not in WRITE_POLICIES:
            raise ValueError(
                f"write_policy must be one of {WRITE_POLICIES}, got '{self.write_policy}'"
            )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pcloud_config_from_env() -> PCloudConfig:
    """Build PCloudConfig from PCLOUD_* environment variables.

    Environment variables:
        PCLOUD_BASE_URL: API base URL (default: https://api.pcloud.com)
        PCLOUD_TOKEN: Bearer token (default: empty)
        PCLOUD_TIMEOUT: Timeout in seconds, "none" to disable (default: 30)
        PCLOUD_CHUNK_SIZE: Chunk size in bytes (default: 1048576)
        PCLOUD_WRITE_POLICY: immediate | chunked (default: immediate)
        PCLOUD_DELETE_REQUIRES_CLOSE: Boolean flag (default: false)

    Returns:
        PCloudConfig instance populated from environment.

    Raises:
        ValueError: If a numeric variable is malformed or the policy unknown.
    """
    timeout_raw = os.environ.get("PCLOUD_TIMEOUT", "30")
    timeout = None if timeout_raw.lower() == "none" else float(timeout_raw)
    return PCloudConfig(
        base_url=os.environ.get("PCLOUD_BASE_URL", DEFAULT_BASE_URL),
        token=os.environ.get("PCLOUD_TOKEN", ""),
        timeout=timeout,
        chunk_size=int(os.environ.get("PCLOUD_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))),
        write_policy=os.environ.get("PCLOUD_WRITE_POLICY", "immediate").lower(),
        delete_requires_close=_env_flag("PCLOUD_DELETE_REQUIRES_CLOSE"),
    )


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_CHUNK_SIZE",
    "PCloudConfig",
    "WRITE_POLICIES",
    "pcloud_config_from_env",
]
