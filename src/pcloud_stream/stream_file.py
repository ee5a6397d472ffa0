# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""RemoteFile: a sequential byte stream over a pCloud file descriptor.

pCloud exposes stateless calls keyed by a descriptor (``/file_read``,
``/file_write``) whose read/write cursor lives on the server. RemoteFile
turns that into a file-like object with read/write/close semantics so that
generic stream utilities such as ``shutil.copyfileobj`` work on remote files.

Lifecycle:
    Construction stats the path (and fails with StatError if it cannot).
    The descriptor is opened lazily on the first read or write and released
    by close() or delete(). After close(), a further read or write opens a
    new descriptor.

Write policies:
    WritePolicy.IMMEDIATE: every write() is exactly one ``/file_write`` call
        with the whole buffer. This is the default.
    WritePolicy.CHUNKED: write() accumulates bytes and sends one
        ``/file_write`` per full chunk (default 1 MiB). A trailing partial
        chunk is sent only by flush(), close() or a read on the same handle,
        and discarded by delete(). Always close (or use ``with``) so the
        tail is not lost. When a chunk fails the pending bytes are dropped:
        the remote state is unknown and a later flush must not resend them.

Example:
    Copying one remote file into another::

        with PCloudClient(token="secret") as client:
            with RemoteFile(client, "/src.bin") as src, \\
                 RemoteFile.create(client, "/dst.bin", write_policy="chunked") as dst:
                shutil.copyfileobj(src, dst)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from .descriptors import Descriptor, DescriptorManager
from .errors import (
    CloseError,
    DecodeError,
    DeleteError,
    FileOperationError,
    PCloudError,
    ReadError,
    StatError,
    WriteError,
)
from .metadata import FileMetadata

if TYPE_CHECKING:
    from datetime import datetime

    from .http_client import PCloudClient

logger = logging.getLogger(__name__)


class WritePolicy(str, Enum):
    """How RemoteFile.write maps to remote ``/file_write`` calls."""

    IMMEDIATE = "immediate"
    CHUNKED = "chunked"


class RemoteFile:
    """File-like stream bound to one remote path.

    Attributes:
        metadata: FileMetadata snapshot from construction time. Only
            ``size_bytes`` changes afterwards, and only on local writes.
        descriptor: Open Descriptor, or None when closed.
        write_policy: WritePolicy used by write().
        chunk_size: Chunk size for WritePolicy.CHUNKED and for read(-1).
        delete_requires_close: Whether delete() fails when its close fails.
        on_progress: Optional callback receiving the total bytes written
            remotely by this handle after every ``/file_write``.

    A RemoteFile is not safe for concurrent use; distinct instances may share
    one PCloudClient.
    """

    def __init__(
        self,
        client: PCloudClient,
        path: str,
        *,
        write_policy: WritePolicy | str | None = None,
        chunk_size: int | None = None,
        delete_requires_close: bool | None = None,
        on_progress: Callable[[int], None] | None = None,
        descriptor: Descriptor | None = None,
    ):
        """Stat ``path`` and build a closed handle on it.

        Args:
            client: PCloudClient to issue calls with.
            path: Remote path.
            write_policy: Overrides client.config.write_policy.
            chunk_size: Overrides client.config.chunk_size.
            delete_requires_close: Overrides client.config.delete_requires_close.
            on_progress: Called with cumulative bytes written remotely.
            descriptor: Already open descriptor to adopt (see create()).

        Raises:
            StatError: If the path cannot be stat'ed.
            ValueError: If chunk_size is not positive or the policy unknown.
        """
        config = client.config
        self._client = client
        self._descriptors = DescriptorManager(client)

        self.write_policy = WritePolicy(write_policy or config.write_policy)
        self.chunk_size = chunk_size if chunk_size is not None else config.chunk_size
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        self.delete_requires_close = (
            config.delete_requires_close
            if delete_requires_close is None
            else delete_requires_close
        )
        self.on_progress = on_progress

        self.descriptor = descriptor
        self._buffer = bytearray()
        self._written = 0

        try:
            response = client.stat(path)
        except PCloudError as exc:
            raise StatError(path, exc) from exc
        content = response.get("metadata")
        if not isinstance(content, dict):
            raise StatError(path, DecodeError("/stat", "response has no metadata"))
        self.metadata = FileMetadata.from_dict(content, path)

    @classmethod
    def create(cls, client: PCloudClient, path: str, **options: Any) -> RemoteFile:
        """Open ``path`` (creating it if absent), then stat it.

        Unlike the constructor this works on paths that do not exist yet.
        The returned handle is already open.

        Raises:
            DescriptorError: If the open response has no descriptor.
            PCloudError: If the open call fails.
            StatError: If the created file cannot be stat'ed.

        Whatever construction raises, the descriptor is closed first.
        """
        manager = DescriptorManager(client)
        descriptor = manager.open(path)
        try:
            return cls(client, path, descriptor=descriptor, **options)
        except Exception:
            try:
                manager.close(descriptor)
            except PCloudError as exc:
                logger.warning(f"Failed to close fd {descriptor} for {path}: {exc}")
            raise

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self.metadata.path

    @property
    def id(self) -> str:
        return self.metadata.id

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def modified_at(self) -> datetime | None:
        return self.metadata.modified_at

    @property
    def created_at(self) -> datetime | None:
        return self.metadata.created_at

    @property
    def is_mine(self) -> bool:
        return self.metadata.is_mine

    @property
    def is_folder(self) -> bool:
        return self.metadata.is_folder

    @property
    def is_shared(self) -> bool:
        return self.metadata.is_shared

    @property
    def size_bytes(self) -> int:
        """Stat size plus bytes written through this handle."""
        return self.metadata.size_bytes

    @property
    def closed(self) -> bool:
        """True when no descriptor is open."""
        return self.descriptor is None

    @property
    def pending(self) -> int:
        """Bytes accepted by write() but not yet sent (chunked policy)."""
        return len(self._buffer)

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    # -------------------------------------------------------------------------
    # Stream operations
    # -------------------------------------------------------------------------

    def _ensure_open(self, error_cls: type[FileOperationError]) -> Descriptor:
        if self.descriptor is None:
            try:
                self.descriptor = self._descriptors.open(self.path)
            except PCloudError as exc:
                raise error_cls(self.path, None, exc) from exc
        return self.descriptor

    def _read_remote(self, count: int) -> bytes:
        if self._buffer:
            self.flush()
        descriptor = self._ensure_open(ReadError)
        try:
            return self._client.file_read(descriptor, count)
        except PCloudError as exc:
            raise ReadError(self.path, descriptor, exc) from exc

    def readinto(self, buffer: Any) -> int:
        """Read up to ``len(buffer)`` bytes into ``buffer`` with one remote call.

        Returns:
            Number of bytes read, 0 at end of stream.

        Raises:
            ReadError: On any protocol or transport failure.
            WriteError: If pending chunked data cannot be flushed first.
        """
        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0
        data = self._read_remote(len(view))
        n = min(len(data), len(view))
        view[:n] = data[:n]
        return n

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` bytes with one remote call.

        With ``size`` negative or None, read until end of stream.
        Returns b"" at end of stream.
        """
        if size is None or size < 0:
            return self.readall()
        if size == 0:
            return b""
        return self._read_remote(size)

    def readall(self) -> bytes:
        """Read until end of stream, chunk_size bytes per remote call."""
        chunks = []
        while True:
            data = self._read_remote(self.chunk_size)
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks)

    def _write_remote(self, data: bytes) -> int:
        descriptor = self._ensure_open(WriteError)
        try:
            written = self._client.file_write(descriptor, data)
        except PCloudError as exc:
            raise WriteError(self.path, descriptor, exc) from exc
        self.metadata.size_bytes += written
        self._written += written
        logger.debug(f"Wrote {written} bytes to {self.path} (fd {descriptor})")
        if self.on_progress is not None:
            self.on_progress(self._written)
        return written

    def _write_chunk(self, chunk: bytes) -> None:
        try:
            written = self._write_remote(chunk)
            if written != len(chunk):
                raise WriteError(
                    self.path,
                    self.descriptor,
                    DecodeError("/file_write", f"short write of {written}/{len(chunk)} bytes"),
                )
        except WriteError:
            logger.warning(
                f"Chunk write to {self.path} failed, dropping {len(self._buffer)} pending bytes"
            )
            self._buffer.clear()
            raise

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write ``data`` according to the handle's write policy.

        Returns:
            IMMEDIATE: bytes the server reports as written.
            CHUNKED: ``len(data)``; every byte is accepted into the buffer.

        Raises:
            WriteError: On any protocol or transport failure. With the
                chunked policy, bytes already sent in earlier chunks stay
                written, the pending buffer is dropped and the transfer
                must be treated as failed.
        """
        data = bytes(data)
        if self.write_policy is WritePolicy.IMMEDIATE:
            return self._write_remote(data)

        self._ensure_open(WriteError)
        self._buffer += data
        while len(self._buffer) >= self.chunk_size:
            self._write_chunk(bytes(self._buffer[: self.chunk_size]))
            del self._buffer[: self.chunk_size]
        return len(data)

    def flush(self) -> None:
        """Send any buffered partial chunk. No-op when nothing is pending."""
        if not self._buffer:
            return
        self._write_chunk(bytes(self._buffer))
        self._buffer.clear()

    def close(self) -> None:
        """Flush pending data and release the descriptor.

        Closing a handle that is not open is a no-op. When the pending flush
        fails its bytes are dropped, the descriptor is still released and
        the flush failure is raised. When the remote close fails the
        descriptor is kept so close() can be retried.

        Raises:
            CloseError: If the pending flush or the remote close fails.
        """
        flush_error = None
        if self._buffer:
            try:
                self.flush()
            except WriteError as exc:
                flush_error = exc
        descriptor = self.descriptor
        if descriptor is not None:
            try:
                self._descriptors.close(descriptor)
            except PCloudError as exc:
                raise CloseError(self.path, descriptor, exc) from exc
            self.descriptor = None
        if flush_error is not None:
            raise CloseError(self.path, descriptor, flush_error) from flush_error

    def delete(self) -> None:
        """Close if open, then delete the remote path.

        Pending chunked data is discarded. When the implicit close fails the
        delete still proceeds (the failure is logged and the descriptor
        dropped) unless ``delete_requires_close`` is set, in which case
        DeleteError is raised and nothing is deleted.

        Raises:
            DeleteError: If the delete call fails, or the close fails and
                ``delete_requires_close`` is set.
        """
        if self._buffer:
            logger.debug(f"Discarding {len(self._buffer)} pending bytes of {self.path}")
            self._buffer.clear()
        if self.descriptor is not None:
            try:
                self.close()
            except CloseError as exc:
                if self.delete_requires_close:
                    raise DeleteError(self.path, self.descriptor, exc) from exc
                logger.warning(f"Close before delete failed, deleting anyway: {exc}")
                self.descriptor = None
        try:
            self._client.delete_file(self.path)
        except PCloudError as exc:
            raise DeleteError(self.path, None, exc) from exc
        logger.info(f"Deleted {self.path}")

    def __enter__(self) -> RemoteFile:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()
            return
        # Keep the block's exception as the one that propagates.
        try:
            self.close()
        except CloseError as close_exc:
            logger.warning(f"Close of {self.path} after {exc_type.__name__} failed: {close_exc}")

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"fd={self.descriptor}"
        return f"<RemoteFile {self.path!r} {state} policy={self.write_policy.value}>"


__all__ = ["RemoteFile", "WritePolicy"]
