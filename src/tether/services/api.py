# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""API descriptors and the request executor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Protocol

import httpx
from anyio.lowlevel import checkpoint_if_cancelled

from tether.codec import JSONDecoder, JSONEncoder, ParameterEncoder, QueryParams, QueryValue
from tether.errors import (
    CancelledError,
    EncodeError,
    StatusCodeError,
    TetherError,
    TransportError,
)

from . import urls
from .core import Failure, MergePolicy, PendingCall, Result, Success, merge
from .endpoint import APIRequest, EmptyResponse, HTTPMethod
from .settings import TetherSettings
from .transport import Transport, default_transport

__all__ = ("API",)

logger = logging.getLogger(__name__)


class _Cancellable(Protocol):
    @property
    def cancelled(self) -> bool: ...


class API:
    """Describes one remote service.

    Subclass with class-level defaults for a service, and/or override any of
    them per instance::

        class DataAPI(API):
            base_url = "https://datausa.io/api/"
            default_query_parameters = {"year": "latest"}

            def create_json_decoder(self) -> JSONDecoder:
                return JSONDecoder(key_strategy=to_snake_case)

        population = DataAPI().send(DataRequest(drilldowns="Nation", measures="Population"))

    Encoders and the decoder are built per instance by the ``create_*``
    factory methods. ``merge_policy`` decides whether request values or API
    defaults win when both define the same query parameter or header;
    headers passed at the call site always win.
    """

    base_url: ClassVar[str] = ""
    default_query_parameters: ClassVar[Mapping[str, QueryValue]] = MappingProxyType({})
    default_headers: ClassVar[Mapping[str, str]] = MappingProxyType({})
    merge_policy: ClassVar[MergePolicy] = MergePolicy.REQUEST_WINS

    def __init__(
        self,
        *,
        base_url: str | None = None,
        transport: Transport | None = None,
        default_query_parameters: Mapping[str, QueryValue] | None = None,
        default_headers: Mapping[str, str] | None = None,
        merge_policy: MergePolicy | None = None,
        parameter_encoder: ParameterEncoder | None = None,
        json_encoder: JSONEncoder | None = None,
        json_decoder: JSONDecoder | None = None,
        settings: TetherSettings | None = None,
    ):
        if base_url is not None:
            self.base_url = base_url
        if default_query_parameters is not None:
            self.default_query_parameters = dict(default_query_parameters)
        if default_headers is not None:
            self.default_headers = dict(default_headers)
        if merge_policy is not None:
            self.merge_policy = merge_policy
        self._transport = transport
        self._settings = settings
        self.parameter_encoder = parameter_encoder or self.create_parameter_encoder()
        self.json_encoder = json_encoder or self.create_json_encoder()
        self.json_decoder = json_decoder or self.create_json_decoder()

    def create_parameter_encoder(self) -> ParameterEncoder:
        return ParameterEncoder()

    def create_json_encoder(self) -> JSONEncoder:
        return JSONEncoder()

    def create_json_decoder(self) -> JSONDecoder:
        return JSONDecoder()

    @property
    def transport(self) -> Transport:
        return self._transport or default_transport()

    @property
    def settings(self) -> TetherSettings:
        return self._settings or TetherSettings.get_instance()

    # -- request building -------------------------------------------------

    def query_parameters(self, request: APIRequest) -> tuple[str, QueryParams]:
        """Resolved path and merged query parameters for ``request``."""
        path = request.path
        query = dict(request.encode_query(self.parameter_encoder))
        names = urls.placeholders(path)
        if names:
            path = urls.fill_path(path, request.path_parameters(self.parameter_encoder))
            for name in names:
                query.pop(name, None)

        defaults = {}
        for key, value in self.default_query_parameters.items():
            encoded = self.parameter_encoder.encode_value(value)
            if encoded is not None:
                defaults[key] = encoded
        return path, merge(query, defaults, self.merge_policy)

    def request_url(self, request: APIRequest) -> httpx.URL:
        path, params = self.query_parameters(request)
        return urls.build_url(self.base_url, path, params)

    def request_headers(
        self,
        request: APIRequest,
        headers: Mapping[str, str] | None = None,
        *,
        has_body: bool = False,
    ) -> dict[str, str]:
        merged = merge(
            request.default_headers, self.default_headers, self.merge_policy, normalize=str.lower
        )
        if headers:
            merged = merge(headers, merged, MergePolicy.REQUEST_WINS, normalize=str.lower)

        present = {name.lower() for name in merged}
        if has_body and "content-type" not in present:
            merged["Content-Type"] = "application/json"
        user_agent = self.settings.USER_AGENT
        if user_agent and "user-agent" not in present:
            merged["User-Agent"] = user_agent
        return merged

    def build_request(
        self, request: APIRequest, *, headers: Mapping[str, str] | None = None
    ) -> httpx.Request:
        """Build the HTTP request for ``request`` without sending it."""
        method = HTTPMethod(request.method).value
        url = self.request_url(request)
        body = request.encode_body(self.json_encoder)
        all_headers = self.request_headers(request, headers, has_body=body is not None)
        try:
            return httpx.Request(method, url, headers=all_headers, content=body)
        except (TypeError, ValueError) as e:
            # header values must be ASCII str or bytes
            raise EncodeError(
                f"Unable to build {method} request: {e}",
                details={"request": type(request).__name__},
                context={"method": method, "url": str(url)},
                cause=e,
            ) from e

    def _log_dispatch(self, http_request: httpx.Request) -> None:
        logger.info("%s request: %s", http_request.method, http_request.url)
        logger.debug("Header fields: %s", self._redacted(http_request.headers))

    def _dispatch(self, http_request: httpx.Request) -> httpx.Response:
        self._log_dispatch(http_request)
        try:
            return self.transport.send(http_request)
        except TetherError:
            raise
        except Exception as e:
            raise _foreign_transport_error(e, http_request) from e

    async def _adispatch(self, http_request: httpx.Request) -> httpx.Response:
        self._log_dispatch(http_request)
        try:
            return await self.transport.asend(http_request)
        except TetherError:
            raise
        except Exception as e:
            raise _foreign_transport_error(e, http_request) from e

    def _redacted(self, headers: Mapping[str, str]) -> dict[str, str]:
        settings = self.settings
        return {
            name: ("<redacted>" if settings.is_redacted(name) else value)
            for name, value in headers.items()
        }

    # -- response handling ------------------------------------------------

    def decode_response(self, request: APIRequest, response: httpx.Response) -> Any:
        """Validate the status code and decode the body into ``request.response_type``."""
        method, url = _origin(response)
        if logger.isEnabledFor(logging.DEBUG):
            limit = self.settings.LOG_BODY_PREVIEW_CHARS
            logger.debug(
                "%s %s -> %s: %s",
                method,
                url,
                response.status_code,
                response.content[:limit].decode("utf-8", errors="replace"),
            )

        if not 200 <= response.status_code < 400:
            raise StatusCodeError(
                response.status_code,
                context={
                    "method": method,
                    "url": url,
                    "response_preview": response.content[:500].decode("utf-8", errors="replace"),
                },
            )

        response_type = request.response_type
        if isinstance(response_type, type) and issubclass(response_type, EmptyResponse):
            return response_type()
        return self.json_decoder.decode(response.content, response_type)

    # -- entry points -----------------------------------------------------

    def send(self, request: APIRequest, *, headers: Mapping[str, str] | None = None) -> Any:
        """Perform ``request`` and return the decoded response, raising on failure."""
        http_request = self.build_request(request, headers=headers)
        response = self._dispatch(http_request)
        return self.decode_response(request, response)

    def execute(
        self,
        request: APIRequest,
        *,
        headers: Mapping[str, str] | None = None,
        call: _Cancellable | None = None,
    ) -> Result:
        """Perform ``request`` and report the outcome as a ``Success`` or ``Failure``.

        When ``call`` is given its ``cancelled`` flag is checked before the
        request is dispatched and again once the response has arrived. Errors
        outside the tether hierarchy are reported as a ``Failure`` wrapping a
        plain ``TetherError``; nothing but interpreter-level exceptions escape.
        """
        context = {"request": type(request).__name__}
        try:
            if call is not None and call.cancelled:
                raise CancelledError("Cancelled before dispatch", context=context)
            http_request = self.build_request(request, headers=headers)
            response = self._dispatch(http_request)
            if call is not None and call.cancelled:
                raise CancelledError("Cancelled after response", context=context)
            return Success(self.decode_response(request, response))
        except TetherError as e:
            logger.debug("%s failed: %s", context["request"], e)
            return Failure(e)
        except Exception as e:
            # e.g. a response_type msgspec cannot decode into
            logger.exception("%s failed unexpectedly", context["request"])
            return Failure(TetherError(f"Unexpected failure: {e}", context=context, cause=e))

    def submit(
        self,
        request: APIRequest,
        callback: Callable[[Result], Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> PendingCall:
        """Run ``request`` on a worker thread and hand the ``Result`` to ``callback``."""

        def run(call: PendingCall) -> None:
            callback(self.execute(request, headers=headers, call=call))

        return PendingCall(run, name=f"tether-{type(request).__name__}").start()

    async def asend(
        self, request: APIRequest, *, headers: Mapping[str, str] | None = None
    ) -> Any:
        """Await ``request`` and return the decoded response, raising on failure.

        Cancellation of the enclosing scope is observed before dispatch and
        after the response arrives; it propagates as the backend's native
        cancellation exception.
        """
        await checkpoint_if_cancelled()
        http_request = self.build_request(request, headers=headers)
        response = await self._adispatch(http_request)
        await checkpoint_if_cancelled()
        return self.decode_response(request, response)


def _foreign_transport_error(error: Exception, request: httpx.Request) -> TransportError:
    """Wrap an error raised by a transport outside the tether hierarchy."""
    return TransportError(
        f"Transport failed: {type(error).__name__}: {error}",
        context={"method": request.method, "url": str(request.url)},
        cause=error,
    )


def _origin(response: httpx.Response) -> tuple[str, str]:
    try:
        return response.request.method, str(response.request.url)
    except RuntimeError:
        # response built without a request, e.g. by a custom transport
        return "-", "-"
