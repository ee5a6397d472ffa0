# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for pcloud-stream.

Protocol-level errors are raised by PCloudClient and describe what went
wrong with a single remote call. File-level errors are raised by RemoteFile
and wrap a protocol-level error with the path and descriptor involved.

Hierarchy:
    PCloudError
        TransportError      network failure, timeout, cancelled request
        HTTPStatusError     response status other than 200
        DecodeError         malformed envelope or missing payload field
        RemoteAPIError      envelope with nonzero ``result``
        DescriptorError     ``fd`` missing from a file_open response
        StatError           stat failed while constructing a RemoteFile
        FileOperationError
            ReadError
            WriteError
            CloseError
            DeleteError

Example:
    Telling a transport failure apart from an API rejection::

        try:
            client.stat("/missing.txt")
        except HTTPStatusError as exc:
            print("server answered", exc.status_code)
        except RemoteAPIError as exc:
            print("pCloud refused:", exc.code, exc.message)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .descriptors import Descriptor


class PCloudError(Exception):
    """Base class for every error raised by pcloud-stream."""


class TransportError(PCloudError):
    """The request could not be built or sent, or no response arrived."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"{method} {url} failed: {reason}")


class HTTPStatusError(PCloudError):
    """The server answered with a status code other than 200."""

    def __init__(self, method: str, url: str, status_code: int):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(f"failed request {method} {url} with status {status_code}")


class DecodeError(PCloudError):
    """The response body is not the envelope the endpoint promises."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"cannot decode response from {endpoint}: {reason}")


class RemoteAPIError(PCloudError):
    """Well-formed envelope whose ``result`` code signals a remote failure."""

    def __init__(self, endpoint: str, code: int, message: str):
        self.endpoint = endpoint
        self.code = code
        self.message = message
        super().__init__(
            f'error on request to {endpoint} with result "{code}" and error "{message}"'
        )


class DescriptorError(PCloudError):
    """file_open succeeded but returned no usable file descriptor."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'unable to get file descriptor for "{path}"')


class StatError(PCloudError):
    """The path could not be stat'ed, so no RemoteFile was built."""

    def __init__(self, path: str, cause: PCloudError):
        self.path = path
        self.cause = cause
        super().__init__(f'unable to get stats for "{path}": {cause}')


class FileOperationError(PCloudError):
    """A RemoteFile operation failed; ``cause`` holds the protocol error."""

    operation = "operate on"

    def __init__(
        self,
        path: str,
        descriptor: Descriptor | None,
        cause: BaseException,
    ):
        self.path = path
        self.descriptor = descriptor
        self.cause = cause
        fd = descriptor.value if descriptor is not None else "-"
        super().__init__(f'cannot {self.operation} "{path}" (fd {fd}): {cause}')


class ReadError(FileOperationError):
    operation = "read"


class WriteError(FileOperationError):
    operation = "write"


class CloseError(FileOperationError):
    operation = "close"


class DeleteError(FileOperationError):
    operation = "delete"


__all__ = [
    "CloseError",
    "DecodeError",
    "DeleteError",
    "DescriptorError",
    "FileOperationError",
    "HTTPStatusError",
    "PCloudError",
    "ReadError",
    "RemoteAPIError",
    "StatError",
    "TransportError",
    "WriteError",
]
