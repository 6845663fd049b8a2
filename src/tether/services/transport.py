# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Transport protocol for the HTTP IO boundary."""

from __future__ import annotations

import asyncio
import logging
import threading
import weakref
from typing import Protocol

import httpx

from tether import errors as _err

from .settings import TetherSettings

__all__ = ("Transport", "HTTPXTransport", "default_transport")

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """IO boundary for HTTP requests.

    Performs one round trip and returns whatever the server answered,
    whatever the status. Network failures are raised as
    ``TransportError``; nothing is retried.
    """

    def send(self, request: httpx.Request) -> httpx.Response:
        ...

    async def asend(self, request: httpx.Request) -> httpx.Response:
        ...


class HTTPXTransport:
    """HTTPX-based transport.

    Wraps an ``httpx.Client`` for blocking calls and an ``httpx.AsyncClient``
    for async ones. Clients that are not passed in are created on first use
    from ``TetherSettings``; both are safe to share between calls.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
        settings: TetherSettings | None = None,
    ):
        self._client = client
        self._async_client = async_client
        # an owned AsyncClient is rebuilt when the running event loop changes
        self._owns_async_client = async_client is None
        self._async_loop: weakref.ref | None = None
        self._settings = settings
        self._lock = threading.Lock()

    @property
    def settings(self) -> TetherSettings:
        return self._settings or TetherSettings.get_instance()

    def _client_kwargs(self) -> dict:
        settings = self.settings
        return {
            "timeout": settings.TIMEOUT_S,
            "verify": settings.VERIFY_SSL,
            "follow_redirects": settings.FOLLOW_REDIRECTS,
            "limits": httpx.Limits(
                max_connections=settings.MAX_CONNECTIONS,
                max_keepalive_connections=settings.MAX_KEEPALIVE_CONNECTIONS,
            ),
        }

    @property
    def client(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(**self._client_kwargs())
            return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        """Async client for the running event loop.

        Pooled connections belong to the loop that opened them, so a client
        created here is replaced when it is used from a different loop (for
        example a second ``asyncio.run``). A client passed in is always used
        as-is.
        """
        loop = _running_loop()
        with self._lock:
            if self._async_client is None or (
                self._owns_async_client and not self._bound_to(loop)
            ):
                if self._async_client is not None:
                    logger.debug("Event loop changed, creating a new AsyncClient")
                self._async_client = httpx.AsyncClient(**self._client_kwargs())
                self._owns_async_client = True
                self._async_loop = weakref.ref(loop) if loop is not None else None
            return self._async_client

    def _bound_to(self, loop: asyncio.AbstractEventLoop | None) -> bool:
        if loop is None or self._async_loop is None:
            return loop is None and self._async_loop is None
        return self._async_loop() is loop

    def send(self, request: httpx.Request) -> httpx.Response:
        try:
            return self.client.send(request)
        except httpx.HTTPError as e:
            raise self._map_error(e, request) from e

    async def asend(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self.async_client.send(request)
        except httpx.HTTPError as e:
            raise self._map_error(e, request) from e

    @staticmethod
    def _map_error(error: httpx.HTTPError, request: httpx.Request) -> _err.TetherError:
        context = {"method": request.method, "url": str(request.url)}
        if isinstance(error, httpx.TimeoutException):
            return _err.TimeoutError(f"Request timed out: {error}", context=context, cause=error)
        if isinstance(error, httpx.UnsupportedProtocol):
            return _err.InvalidURLError(f"Unsupported URL: {error}", context=context, cause=error)
        return _err.TransportError(f"Network error: {error}", context=context, cause=error)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._async_client.aclose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        # not under asyncio (trio, or called outside a coroutine)
        return None


_default: HTTPXTransport | None = None
_default_lock = threading.Lock()


def default_transport() -> HTTPXTransport:
    """Process-wide transport used by APIs that do not bring their own."""
    global _default
    with _default_lock:
        if _default is None:
            logger.debug("Creating default HTTPXTransport")
            _default = HTTPXTransport()
        return _default
