# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared pytest fixtures for pcloud_stream tests.

FakePCloud is an in-memory stand-in for the pCloud API, plugged into
httpx through MockTransport. It keeps files, open descriptors with their
cursors, and a log of every call so tests can assert on the exact remote
traffic a stream operation produces.
"""

from __future__ import annotations

import posixpath
from typing import Any

import httpx
import pytest

from pcloud_stream import PCloudClient

TOKEN = "test-token"
BASE_URL = "https://api.pcloud.test"
DATE = "Wed, 02 Oct 2013 13:23:35 +0000"

O_CREAT = 0x0040


class FakePCloud:
    """In-memory pCloud API implementing the endpoints pcloud_stream uses."""

    def __init__(self) -> None:
        self.files: dict[str, bytearray] = {}
        self.ids: dict[str, str] = {}
        self.fds: dict[int, dict[str, Any]] = {}
        self.next_fd = 1
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self.failures: dict[str, dict[str, Any]] = {}

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def add_file(self, path: str, content: bytes = b"") -> None:
        self.files[path] = bytearray(content)
        self.ids.setdefault(path, f"f{len(self.ids) + 1}")

    def fail(self, endpoint: str, *, status: int | None = None, result: int = 2000,
             error: str = "Log in failed.", commit: bool = False) -> None:
        """Make the next call to ``endpoint`` fail once.

        With ``commit`` the call takes effect on the fake before the failure
        is returned, like a response lost after the server applied it.
        """
        if status is not None:
            self.failures[endpoint] = {"status": status}
        else:
            self.failures[endpoint] = {"result": result, "error": error}
        self.failures[endpoint]["commit"] = commit

    def endpoint_calls(self, endpoint: str) -> list[dict[str, str]]:
        return [params for _, ep, params in self.calls if ep == endpoint]

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path
        params = dict(request.url.params)
        self.calls.append((request.method, endpoint, params))

        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(200, json={"result": 1000, "error": "Log in required."})

        method = getattr(self, "_" + endpoint.strip("/"), None)
        failure = self.failures.pop(endpoint, None)
        if failure is not None:
            if failure.pop("commit") and method is not None:
                method(params, request.content)
            if "status" in failure:
                return httpx.Response(failure["status"], text="failure")
            return httpx.Response(200, json=failure)

        if method is None:
            return httpx.Response(404, text="not found")
        return method(params, request.content)

    def _metadata(self, path: str) -> dict[str, Any]:
        return {
            "id": self.ids[path],
            "path": path,
            "name": posixpath.basename(path),
            "modified": DATE,
            "created": DATE,
            "ismine": True,
            "isfolder": False,
            "isshared": False,
            "size": len(self.files[path]),
        }

    @staticmethod
    def _error(result: int, error: str) -> httpx.Response:
        return httpx.Response(200, json={"result": result, "error": error})

    def _userinfo(self, params: dict[str, str], body: bytes) -> httpx.Response:
        return httpx.Response(200, json={"result": 0, "email": "user@example.com", "userid": 42})

    def _listfolder(self, params: dict[str, str], body: bytes) -> httpx.Response:
        folder = params["path"].rstrip("/") or "/"
        contents = [
            self._metadata(path)
            for path in sorted(self.files)
            if posixpath.dirname(path) == folder
        ]
        return httpx.Response(
            200, json={"result": 0, "metadata": {"path": folder, "contents": contents}}
        )

    def _uploadfile(self, params: dict[str, str], body: bytes) -> httpx.Response:
        path = posixpath.join(params["path"], params["filename"])
        self.add_file(path, body)
        return httpx.Response(200, json={"result": 0, "metadata": [self._metadata(path)]})

    def _deletefile(self, params: dict[str, str], body: bytes) -> httpx.Response:
        path = params["path"]
        if path not in self.files:
            return self._error(2009, "File not found.")
        metadata = self._metadata(path)
        del self.files[path]
        return httpx.Response(200, json={"result": 0, "metadata": metadata})

    def _stat(self, params: dict[str, str], body: bytes) -> httpx.Response:
        path = params["path"]
        if path not in self.files:
            return self._error(2009, "File not found.")
        return httpx.Response(200, json={"result": 0, "metadata": self._metadata(path)})

    def _file_open(self, params: dict[str, str], body: bytes) -> httpx.Response:
        path = params["path"]
        flags = int(params["flags"])
        if path not in self.files:
            if not flags & O_CREAT:
                return self._error(2009, "File not found.")
            self.add_file(path)
        fd = self.next_fd
        self.next_fd += 1
        self.fds[fd] = {"path": path, "pos": 0}
        return httpx.Response(200, json={"result": 0, "fd": fd, "fileid": 1})

    def _session(self, params: dict[str, str]) -> dict[str, Any] | None:
        return self.fds.get(int(params["fd"]))

    def _file_read(self, params: dict[str, str], body: bytes) -> httpx.Response:
        session = self._session(params)
        if session is None:
            return self._error(1007, "Invalid or closed file descriptor.")
        content = self.files[session["path"]]
        start = session["pos"]
        data = bytes(content[start : start + int(params["count"])])
        session["pos"] = start + len(data)
        return httpx.Response(200, content=data)

    def _file_write(self, params: dict[str, str], body: bytes) -> httpx.Response:
        session = self._session(params)
        if session is None:
            return self._error(1007, "Invalid or closed file descriptor.")
        content = self.files[session["path"]]
        content.extend(body)
        session["pos"] = len(content)
        return httpx.Response(200, json={"result": 0, "bytes": len(body)})

    def _file_close(self, params: dict[str, str], body: bytes) -> httpx.Response:
        if self.fds.pop(int(params["fd"]), None) is None:
            return self._error(1007, "Invalid or closed file descriptor.")
        return httpx.Response(200, json={"result": 0})


@pytest.fixture
def fake() -> FakePCloud:
    """Fresh in-memory pCloud."""
    return FakePCloud()


@pytest.fixture
def http(fake):
    """httpx.Client routed to the fake pCloud."""
    with httpx.Client(transport=httpx.MockTransport(fake.handler)) as http_client:
        yield http_client


@pytest.fixture
def client(http) -> PCloudClient:
    """PCloudClient bound to the fake pCloud."""
    return PCloudClient(BASE_URL, token=TOKEN, http=http)


# Marker registration
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "network: marks tests requiring network access")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
