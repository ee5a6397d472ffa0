# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP client for the pCloud API.

This module provides PCloudClient, the protocol adapter between Python code
and the pCloud REST API. Every call is a single blocking round trip: an
authenticated request with query-encoded parameters and an optional raw
body, decoded into either a success envelope or a typed error.

Features:
    - Bearer token authentication on every call
    - Uniform envelope decoding (``result`` == 0 or absent is success)
    - Raw variant for binary payloads (``/file_read``)
    - Injectable httpx.Client, owned default client otherwise
    - Per-call timeout override

Example:
    Direct usage::

        with PCloudClient(token="secret") as client:
            info = client.userinfo()
            paths = client.list_folder("/")

    Injected transport (shared connection pool)::

        http = httpx.Client(http2=False, timeout=60)
        client = PCloudClient(token="secret", http=http)
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from ..config import PCloudConfig
from ..errors import DecodeError, HTTPStatusError, RemoteAPIError, TransportError

if TYPE_CHECKING:
    from ..descriptors import Descriptor

logger = logging.getLogger("pcloud_stream")

# Marker for "use PCloudConfig.timeout"
_CONFIG_TIMEOUT: Any = object()


class PCloudClient:
    """HTTP client for the pCloud API.

    Attributes:
        config: PCloudConfig in effect (base_url and token included).
        base_url: API base URL without trailing slash.
        token: Bearer token sent on every call.

    The underlying httpx.Client is used as-is when injected and may be
    shared between clients and threads. When none is given, PCloudClient
    creates its own and closes it in close().
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        http: httpx.Client | None = None,
        config: PCloudConfig | None = None,
    ):
        """Initialize client.

        Args:
            base_url: API base URL. Overrides config.base_url when given.
            token: Bearer token. Overrides config.token when given.
            http: httpx.Client to send requests with.
            config: PCloudConfig instance. If None, creates default.
        """
        config = config or PCloudConfig()
        overrides: dict[str, Any] = {}
        if base_url:
            overrides["base_url"] = base_url
        if token is not None:
            overrides["token"] = token
        self.config = dataclasses.replace(config, **overrides) if overrides else config

        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(timeout=self.config.timeout)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def token(self) -> str:
        return self.config.token

    def close(self) -> None:
        """Release the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> PCloudClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        """Build request headers with keep-alive hint and bearer token."""
        return {
            "Connection": "keep-alive",
            "Authorization": f"Bearer {self.token}",
        }

    # -------------------------------------------------------------------------
    # Protocol
    # -------------------------------------------------------------------------

    def _send(
        self,
        method: str,
        endpoint: str,
        body: bytes | None,
        params: Mapping[str, str] | None,
        timeout: Any,
    ) -> httpx.Response:
        """Send one request and return the fully read, released response."""
        url = f"{self.base_url}{endpoint}"
        if timeout is _CONFIG_TIMEOUT:
            timeout = self.config.timeout

        logger.debug(f"{method} {endpoint} params={dict(params or {})}")
        try:
            request = self._http.build_request(
                method,
                url,
                params=list(params.items()) if params else None,
                content=body,
                headers=self._headers(),
                timeout=timeout,
            )
            response = self._http.send(request, stream=True)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(method, url, str(exc) or type(exc).__name__) from exc

        try:
            response.read()
        except httpx.RequestError as exc:
            raise TransportError(method, url, str(exc) or type(exc).__name__) from exc
        finally:
            response.close()

        if response.status_code != 200:
            raise HTTPStatusError(method, str(response.url), response.status_code)
        return response

    def execute_raw(
        self,
        method: str,
        endpoint: str,
        body: bytes | None = None,
        params: Mapping[str, str] | None = None,
        *,
        timeout: Any = _CONFIG_TIMEOUT,
    ) -> bytes:
        """Perform a request and return the raw response body.

        Args:
            method: HTTP method.
            endpoint: API endpoint path (e.g. "/file_read").
            body: Optional raw request body.
            params: Query parameters, sent in insertion order.
            timeout: Seconds, httpx.Timeout or None. Defaults to config.timeout.

        Raises:
            TransportError: Request could not be sent or timed out.
            HTTPStatusError: Status code other than 200.
        """
        return self._send(method, endpoint, body, params, timeout).content

    def execute(
        self,
        method: str,
        endpoint: str,
        body: bytes | None = None,
        params: Mapping[str, str] | None = None,
        *,
        timeout: Any = _CONFIG_TIMEOUT,
    ) -> dict[str, Any]:
        """Perform a request and decode the JSON envelope.

        Same arguments as execute_raw.

        Returns:
            The decoded envelope, ``result`` field included when present.

        Raises:
            TransportError: Request could not be sent or timed out.
            HTTPStatusError: Status code other than 200.
            DecodeError: Body is not a JSON object.
            RemoteAPIError: Envelope ``result`` is present and nonzero.
        """
        response = self._send(method, endpoint, body, params, timeout)
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(endpoint, str(exc)) from exc
        if not isinstance(data, dict):
            raise DecodeError(endpoint, f"expected a JSON object, got {type(data).__name__}")

        result = data.get("result", 0)
        if result != 0:
            raise RemoteAPIError(endpoint, result, str(data.get("error", "")))
        return data

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def userinfo(self) -> dict[str, Any]:
        """Get account information for the token owner."""
        return self.execute("GET", "/userinfo")

    def list_folder(self, path: str) -> list[str]:
        """List the paths of the direct children of a folder."""
        data = self.execute("GET", "/listfolder", params={"path": path})
        contents = (data.get("metadata") or {}).get("contents")
        if not isinstance(contents, list):
            raise DecodeError("/listfolder", f'unable to get content for "{path}"')
        return [item["path"] for item in contents]

    def upload_file(self, path: str, filename: str, data: bytes) -> dict[str, Any]:
        """Upload ``data`` as ``filename`` inside folder ``path`` in one call."""
        params = {"path": path, "filename": filename}
        return self.execute("PUT", "/uploadfile", body=data, params=params)

    def delete_file(self, path: str) -> None:
        """Delete the file at ``path``."""
        self.execute("PUT", "/deletefile", params={"path": path})

    def stat(self, path: str) -> dict[str, Any]:
        """Get the metadata envelope for ``path`` without opening it."""
        return self.execute("GET", "/stat", params={"path": path})

    def file_open(self, path: str, flags: int) -> dict[str, Any]:
        """Open ``path`` with pCloud open ``flags``; the envelope carries ``fd``."""
        params = {"flags": str(flags), "path": path}
        return self.execute("GET", "/file_open", params=params)

    def file_read(
        self, fd: Descriptor, count: int, *, timeout: Any = _CONFIG_TIMEOUT
    ) -> bytes:
        """Read up to ``count`` bytes at the descriptor's remote cursor."""
        params = {"fd": fd.value, "count": str(count)}
        return self.execute_raw("GET", "/file_read", params=params, timeout=timeout)

    def file_write(
        self, fd: Descriptor, data: bytes, *, timeout: Any = _CONFIG_TIMEOUT
    ) -> int:
        """Write ``data`` at the descriptor's remote cursor.

        Returns:
            Number of bytes the server reports as written.
        """
        response = self.execute(
            "PUT", "/file_write", body=data, params={"fd": fd.value}, timeout=timeout
        )
        written = response.get("bytes")
        if isinstance(written, bool) or not isinstance(written, (int, float)):
            raise DecodeError("/file_write", "unable to get written bytes")
        return int(written)

    def file_close(self, fd: Descriptor) -> None:
        """Close a remote descriptor."""
        self.execute("GET", "/file_close", params={"fd": fd.value})


__all__ = ["PCloudClient"]
