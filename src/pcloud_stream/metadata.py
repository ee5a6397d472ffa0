# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Stat metadata snapshot for remote files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any


def parse_rfc1123(value: Any) -> datetime | None:
    """Parse an RFC-1123 date such as "Wed, 02 Oct 2013 13:23:35 +0000".

    Returns None for missing or unparsable values instead of raising.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


@dataclass
class FileMetadata:
    """Snapshot of ``/stat`` metadata, taken once and never refreshed."""

    path: str
    id: str = ""
    name: str = ""
    modified_at: datetime | None = None
    created_at: datetime | None = None
    is_mine: bool = False
    is_folder: bool = False
    is_shared: bool = False
    size_bytes: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> FileMetadata:
        """Create FileMetadata from the ``metadata`` object of a stat response.

        ``path`` is used when the response does not carry a canonical path.
        """
        known = {
            "path", "id", "name", "modified", "created",
            "ismine", "isfolder", "isshared", "size",
        }
        extra = {k: v for k, v in data.items() if k not in known}
        remote_path = data.get("path")
        return cls(
            path=remote_path if isinstance(remote_path, str) and remote_path else path,
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            modified_at=parse_rfc1123(data.get("modified")),
            created_at=parse_rfc1123(data.get("created")),
            is_mine=bool(data.get("ismine", False)),
            is_folder=bool(data.get("isfolder", False)),
            is_shared=bool(data.get("isshared", False)),
            size_bytes=int(data.get("size") or 0),
            extra=extra,
        )


__all__ = ["FileMetadata", "parse_rfc1123"]
