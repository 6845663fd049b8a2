# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""
Fixtures for the service tests.

Every test talks to an ``httpx.MockTransport`` wrapped in a real
``HTTPXTransport``, so request building, the transport boundary and
response decoding are all exercised without network access.
"""

from __future__ import annotations

from typing import Any

import httpx
import msgspec.json
import pytest

from tether.services import HTTPXTransport


class RecordingServer:
    """Mock server that records requests and replays a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content = b"{}"
        self.headers = {"Content-Type": "application/json"}
        self.error: Exception | None = None

    def reply(self, status_code: int = 200, payload: Any = None, *, content: bytes | None = None):
        self.status_code = status_code
        if content is not None:
            self.content = content
        else:
            self.content = msgspec.json.encode(payload if payload is not None else {})
        return self

    def fail_with(self, error: Exception):
        self.error = error
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request reached the server"
        return self.requests[-1]


def make_transport(handler) -> HTTPXTransport:
    mock = httpx.MockTransport(handler)
    return HTTPXTransport(
        client=httpx.Client(transport=mock),
        async_client=httpx.AsyncClient(transport=mock),
    )


@pytest.fixture
def server() -> RecordingServer:
    return RecordingServer()


@pytest.fixture
def transport(server):
    transport = make_transport(server)
    yield transport
    transport.close()
