# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""pcloud-stream: file-like streams over the pCloud descriptor API.

This package adapts pCloud's stateless, descriptor-based file API into
sequential byte streams, so generic copy utilities can work on remote files
as if they were local file handles.

Main components:
    PCloudConfig: Configuration dataclass
    PCloudClient: Authenticated protocol adapter with envelope decoding
    DescriptorManager: Opens and closes remote descriptors
    RemoteFile: File-like stream bound to one remote path
    pcloud_config_from_env: Factory to build config from environment

Usage:
    import shutil
    from pcloud_stream import PCloudClient, RemoteFile

    with PCloudClient(token="secret") as client:
        with RemoteFile(client, "/example.txt") as src, \\
             RemoteFile.create(client, "/example_copy.txt") as dst:
            shutil.copyfileobj(src, dst)
"""

__version__ = "0.1.0"

from .config import PCloudConfig, pcloud_config_from_env
from .descriptors import Descriptor, DescriptorManager
from .errors import (
    CloseError,
    DecodeError,
    DeleteError,
    DescriptorError,
    FileOperationError,
    HTTPStatusError,
    PCloudError,
    ReadError,
    RemoteAPIError,
    StatError,
    TransportError,
    WriteError,
)
from .http_client import PCloudClient
from .metadata import FileMetadata
from .stream_file import RemoteFile, WritePolicy

__all__ = [
    "CloseError",
    "DecodeError",
    "DeleteError",
    "Descriptor",
    "DescriptorError",
    "DescriptorManager",
    "FileMetadata",
    "FileOperationError",
    "HTTPStatusError",
    "PCloudClient",
    "PCloudConfig",
    "PCloudError",
    "ReadError",
    "RemoteAPIError",
    "RemoteFile",
    "StatError",
    "TransportError",
    "WritePolicy",
    "WriteError",
    "main",
    "pcloud_config_from_env",
]


def main() -> None:
    """CLI entry point."""
    from .cli import cli

    cli()
