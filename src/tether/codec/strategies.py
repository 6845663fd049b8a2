# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Encoding strategies shared by the JSON and parameter encoders.

Strategies are applied uniformly across a value tree after msgspec has
reduced it to builtins: every mapping key goes through the key strategy,
every date through the date strategy, and so on.
"""

from __future__ import annotations

import base64
import math
import re
from collections.abc import Callable
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any

import msgspec

from tether.errors import EncodeError

__all__ = (
    "KeyStrategy",
    "to_snake_case",
    "to_camel_case",
    "to_kebab_case",
    "DateEncoding",
    "DateDecoding",
    "BytesEncoding",
    "NonFiniteFloats",
    "encode_date",
    "encode_bytes",
    "encode_float",
)

KeyStrategy = Callable[[str], str]

_WORD_BOUNDARY = re.compile(r"(.)([A-Z][a-z]+)")
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    """``dayLength`` -> ``day_length``, ``myURLValue`` -> ``my_url_value``."""
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return _LOWER_UPPER.sub(r"\1_\2", name).lower()


def to_camel_case(name: str) -> str:
    """``day_length`` -> ``dayLength``. Leading underscores are kept."""
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    head, *rest = stripped.split("_")
    return prefix + head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_kebab_case(name: str) -> str:
    return to_snake_case(name).replace("_", "-")


class DateEncoding(str, Enum):
    ISO8601 = "iso8601"
    SECONDS_SINCE_EPOCH = "seconds_since_epoch"
    MILLISECONDS_SINCE_EPOCH = "milliseconds_since_epoch"


class DateDecoding(str, Enum):
    ISO8601 = "iso8601"
    # numeric timestamps; relies on msgspec's lax conversion
    SECONDS_SINCE_EPOCH = "seconds_since_epoch"


class BytesEncoding(str, Enum):
    BASE64 = "base64"
    INTEGER_LIST = "integer_list"


class NonFiniteFloats(msgspec.Struct, frozen=True):
    """String stand-ins for ``inf``, ``-inf`` and ``nan``."""

    positive_infinity: str = "Infinity"
    negative_infinity: str = "-Infinity"
    nan: str = "NaN"


def _as_datetime(value: date) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def encode_date(value: date | time, strategy: DateEncoding | Callable[[Any], Any]) -> Any:
    if not isinstance(strategy, DateEncoding):
        return strategy(value)
    if isinstance(value, time) or strategy is DateEncoding.ISO8601:
        return value.isoformat()
    seconds = _as_datetime(value).timestamp()
    if strategy is DateEncoding.SECONDS_SINCE_EPOCH:
        return seconds
    return seconds * 1000.0


def encode_bytes(value: bytes | bytearray | memoryview, strategy: BytesEncoding | Callable[[bytes], Any]) -> Any:
    data = bytes(value)
    if not isinstance(strategy, BytesEncoding):
        return strategy(data)
    if strategy is BytesEncoding.INTEGER_LIST:
        return list(data)
    return base64.b64encode(data).decode("ascii")


def encode_float(value: float, strategy: NonFiniteFloats | None) -> Any:
    if math.isfinite(value):
        return value
    if strategy is None:
        raise EncodeError(
            f"Unable to encode non-finite float {value!r}",
            details={"value": repr(value)},
        )
    if math.isnan(value):
        return strategy.nan
    return strategy.positive_infinity if value > 0 else strategy.negative_infinity
