# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Declarative HTTP client: describe an API and its requests as data."""

from . import errors
from .codec import (
    BytesEncoding,
    DateDecoding,
    DateEncoding,
    JSONDecoder,
    JSONEncoder,
    NonFiniteFloats,
    ParameterEncoder,
    to_camel_case,
    to_kebab_case,
    to_snake_case,
)
from .errors import (
    CancelledError,
    DecodeError,
    EncodeError,
    InvalidURLError,
    StatusCodeError,
    TetherError,
    TransportError,
)
from .services import (
    API,
    APIRequest,
    EmptyResponse,
    Failure,
    HTTPMethod,
    HTTPXTransport,
    MergePolicy,
    PendingCall,
    Result,
    Success,
    TetherSettings,
    Transport,
)

__version__ = "0.1.0"

__all__ = (
    "errors",
    "API",
    "APIRequest",
    "EmptyResponse",
    "HTTPMethod",
    "MergePolicy",
    "Result",
    "Success",
    "Failure",
    "PendingCall",
    "Transport",
    "HTTPXTransport",
    "TetherSettings",
    "JSONEncoder",
    "JSONDecoder",
    "ParameterEncoder",
    "DateEncoding",
    "DateDecoding",
    "BytesEncoding",
    "NonFiniteFloats",
    "to_snake_case",
    "to_camel_case",
    "to_kebab_case",
    "TetherError",
    "InvalidURLError",
    "EncodeError",
    "TransportError",
    "StatusCodeError",
    "DecodeError",
    "CancelledError",
)
