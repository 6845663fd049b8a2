# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Flatten structured request values into query parameter maps."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Union

import msgspec

from tether.errors import EncodeError

from .json import JSONEncoder

__all__ = ("QueryValue", "QueryParams", "ParameterEncoder")

# Values accepted in default query maps
QueryValue = Union[str, int, float, bool, datetime, date, None]

# What ParameterEncoder produces: scalars or repeated scalar keys
QueryParams = dict[str, Union[str, int, float, bool, list[Union[str, int, float, bool]]]]


class ParameterEncoder:
    """Turn a structured value into a flat ``{name: scalar}`` mapping.

    The value is serialized to a JSON object with the wrapped ``JSONEncoder``
    (so its key, date and binary strategies apply) and then flattened one
    level:

    - ``None`` values are dropped.
    - Scalars are kept as-is.
    - Lists of scalars become repeated query keys.
    - Nested objects, and lists holding objects, become compact JSON strings.
    """

    def __init__(self, json_encoder: JSONEncoder | None = None, **strategies: Any):
        if json_encoder is not None and strategies:
            raise TypeError("Pass either json_encoder or strategy keywords, not both")
        self.json_encoder = json_encoder or JSONEncoder(**strategies)

    def encode(self, value: Any) -> QueryParams:
        obj = msgspec.json.decode(self.json_encoder.encode(value))
        if not isinstance(obj, dict):
            raise EncodeError(
                f"{type(value).__name__} does not encode to a JSON object",
                details={"type": type(value).__name__, "encoded": type(obj).__name__},
            )
        return {key: flat for key, item in obj.items() if (flat := _flatten(item)) is not None}

    def encode_value(self, value: QueryValue) -> Any:
        """Encode a single default-map value with the same strategies."""
        return _flatten(self.json_encoder.to_builtins(value))


def _flatten(item: Any) -> Any:
    if item is None or isinstance(item, (str, int, float, bool)):
        return item
    if isinstance(item, list) and all(
        isinstance(x, (str, int, float, bool)) for x in item
    ):
        return item
    return msgspec.json.encode(item).decode("utf-8")
