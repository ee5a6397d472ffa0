# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Remote file descriptors: opaque session tokens and their open/close calls.

pCloud returns a numeric ``fd`` from ``/file_open``. It identifies a
server-side session (with its own read/write cursor) and must be passed back
on every ``/file_read``, ``/file_write`` and ``/file_close``. It is modeled
as a Descriptor token, not an int, so it cannot be used in arithmetic.

DescriptorManager issues the open and close calls. It keeps no state: the
caller (RemoteFile) owns the descriptor and is responsible for closing it.

Example:
    ::

        manager = DescriptorManager(client)
        fd = manager.open("/notes.txt")
        try:
            data = client.file_read(fd, 4096)
        finally:
            manager.close(fd)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import DescriptorError

if TYPE_CHECKING:
    from .http_client import PCloudClient

logger = logging.getLogger(__name__)

# pCloud open flags: O_CREAT (0x0040) | O_APPEND (0x0400)
OPEN_FLAGS = 0x440


@dataclass(frozen=True)
class Descriptor:
    """Opaque per-session token for an open remote file.

    Attributes:
        value: Canonical string form of the remote integer descriptor.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_response(cls, data: dict[str, Any], path: str) -> Descriptor:
        """Extract the descriptor from a file_open envelope.

        Args:
            data: Decoded file_open response.
            path: Path that was opened, for error reporting.

        Raises:
            DescriptorError: If ``fd`` is missing or not an integral number.
        """
        fd = data.get("fd")
        if isinstance(fd, bool) or not isinstance(fd, (int, float)):
            raise DescriptorError(path)
        if isinstance(fd, float):
            if not fd.is_integer():
                raise DescriptorError(path)
            fd = int(fd)
        return cls(str(fd))


class DescriptorManager:
    """Opens and closes remote descriptors through a PCloudClient."""

    def __init__(self, client: PCloudClient):
        self._client = client

    def open(self, path: str) -> Descriptor:
        """Open (creating if absent) a remote file for read and write.

        Each call opens a new remote session; descriptors are never pooled.

        Raises:
            DescriptorError: If the response carries no ``fd``.
            PCloudError: Any protocol error from the open call.
        """
        data = self._client.file_open(path, OPEN_FLAGS)
        descriptor = Descriptor.from_response(data, path)
        logger.info(f"Opened {path} as fd {descriptor}")
        return descriptor

    def close(self, descriptor: Descriptor) -> None:
        """Close a remote descriptor. Closing twice is an error remotely."""
        self._client.file_close(descriptor)
        logger.info(f"Closed fd {descriptor}")


__all__ = ["Descriptor", "DescriptorManager", "OPEN_FLAGS"]
