# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from .json import JSONDecoder, JSONEncoder
from .params import ParameterEncoder, QueryParams, QueryValue
from .strategies import (
    BytesEncoding,
    DateDecoding,
    DateEncoding,
    KeyStrategy,
    NonFiniteFloats,
    to_camel_case,
    to_kebab_case,
    to_snake_case,
)

__all__ = (
    "JSONEncoder",
    "JSONDecoder",
    "ParameterEncoder",
    "QueryParams",
    "QueryValue",
    "KeyStrategy",
    "DateEncoding",
    "DateDecoding",
    "BytesEncoding",
    "NonFiniteFloats",
    "to_snake_case",
    "to_camel_case",
    "to_kebab_case",
)
