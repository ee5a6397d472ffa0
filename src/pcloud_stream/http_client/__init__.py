# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP client for the pCloud API.

Example:
    >>> from pcloud_stream.http_client import PCloudClient
    >>> client = PCloudClient(token="secret")
    >>> client.list_folder("/")
    ['/Documents', '/example.txt']
"""

from .client import PCloudClient

__all__ = ["PCloudClient"]
