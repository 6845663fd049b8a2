# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Error hierarchy for tether.

Every failure a call can end in maps to exactly one class here, so callers
can tell a bad URL from a network failure, a non-success status or a body
that does not match the declared response type.
"""

from __future__ import annotations

from typing import Any, ClassVar

__all__ = (
    "TetherError",
    "InvalidURLError",
    "EncodeError",
    "TransportError",
    "TimeoutError",
    "StatusCodeError",
    "DecodeError",
    "CancelledError",
)


class TetherError(Exception):
    """Base for all tether errors.

    Carries a machine-readable ``code``, an optional HTTP ``status_code`` and
    free-form ``context`` describing the call that failed.
    """

    default_message: ClassVar[str] = "tether error"
    default_status_code: ClassVar[int | None] = None
    code: ClassVar[str] = "tether_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause is not None:
            self.__cause__ = cause
        self.message = message or self.default_message
        self.details = details or {}
        self.status_code = status_code if status_code is not None else type(self).default_status_code
        self.context = context or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        """Serialize error to a structured dictionary for logging."""
        data = {
            "error": self.__class__.__name__,
            "code": type(self).code,
            "message": self.message,
            **({"status_code": self.status_code} if self.status_code is not None else {}),
            **({"details": self.details} if self.details else {}),
            **({"context": self.context} if self.context else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> BaseException | None:
        return self.__cause__


class InvalidURLError(TetherError):
    """The request URL could not be built or is not an absolute http(s) URL."""

    default_message = "Malformed request URL"
    code = "invalid_url"


class EncodeError(TetherError):
    """A request value could not be serialized into query parameters or a body."""

    default_message = "Request value could not be encoded"
    code = "encode_failed"


class TransportError(TetherError):
    """Transport-level failure (unreachable host, connection reset, protocol error)."""

    default_message = "Transport failure"
    code = "transport_error"


class TimeoutError(TransportError):
    """The transport gave up waiting on the server."""

    default_message = "Request timed out"
    code = "timeout"


class StatusCodeError(TetherError):
    """The server answered with a status code outside ``[200, 400)``."""

    default_message = "Unsuccessful status code"
    code = "unsuccessful_status"

    def __init__(self, status_code: int, message: str | None = None, **kwargs: Any):
        super().__init__(
            message or f"{status_code}: An error occurred.",
            status_code=status_code,
            **kwargs,
        )


class DecodeError(TetherError):
    """The response body is not valid JSON or does not match the response type."""

    default_message = "Response could not be decoded"
    code = "decode_failed"


class CancelledError(TetherError):
    """A callback-style call was cancelled before it could deliver a value."""

    default_message = "Request was cancelled"
    code = "cancelled"
