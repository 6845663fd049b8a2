# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Request descriptors: what a single call sends and what it expects back."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar

import msgspec

from tether.codec import JSONEncoder, ParameterEncoder, QueryParams

__all__ = ("HTTPMethod", "EmptyResponse", "APIRequest")


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class EmptyResponse(msgspec.Struct, frozen=True):
    """Response type for calls whose body is empty or irrelevant.

    The executor never attempts to decode a body into this type, so it works
    for zero-byte responses such as ``204 No Content``.
    """


class APIRequest(msgspec.Struct):
    """Base for request descriptors.

    Subclass it and declare the request's values as struct fields; the class
    attributes below describe the HTTP operation::

        class UserPostsRequest(APIRequest, kw_only=True):
            path = "users/{user_id}/posts"
            response_type = list[Post]

            user_id: int
            limit: int = 20

    Placeholders in ``path`` are filled from the encoded field of the same
    name, which is then left out of the query string. ``path`` may also be a
    property when it needs more than field substitution.

    By default GET requests send their fields as query parameters and POST
    requests send them as a JSON body; PUT and DELETE send neither unless
    ``encode_query`` or ``encode_body`` is overridden.
    """

    path: ClassVar[str] = ""
    method: ClassVar[HTTPMethod] = HTTPMethod.GET
    default_headers: ClassVar[Mapping[str, str]] = MappingProxyType({})
    response_type: ClassVar[Any] = EmptyResponse

    def encode_query(self, encoder: ParameterEncoder) -> QueryParams:
        """Parameters to append to the URL as the query string."""
        if self.method == HTTPMethod.GET:
            return encoder.encode(self)
        return {}

    def encode_body(self, encoder: JSONEncoder) -> bytes | None:
        """Bytes to send as the HTTP body, or ``None`` for no body."""
        if self.method == HTTPMethod.POST:
            return encoder.encode(self)
        return None

    def path_parameters(self, encoder: ParameterEncoder) -> QueryParams:
        """Values available to ``{name}`` placeholders in ``path``."""
        return encoder.encode(self)
