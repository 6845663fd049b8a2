# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""JSON body encoder and response decoder built on msgspec."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any, Literal, TypeVar

import msgspec

from tether.errors import DecodeError, EncodeError

from .strategies import (
    BytesEncoding,
    DateDecoding,
    DateEncoding,
    KeyStrategy,
    NonFiniteFloats,
    encode_bytes,
    encode_date,
    encode_float,
)

__all__ = ("JSONEncoder", "JSONDecoder")

T = TypeVar("T")

# Left untouched by msgspec.to_builtins so the strategies below can handle them
_PASSTHROUGH_TYPES = (bytes, bytearray, memoryview, datetime, date, time)


class JSONEncoder:
    """Serialize structured values (msgspec Structs, dataclasses, dicts...) to JSON.

    Args:
        key_strategy: Callable applied to every mapping key, e.g. ``to_snake_case``.
        date_strategy: How ``date``/``datetime`` values are written.
        bytes_strategy: How binary values are written.
        non_finite_floats: String stand-ins for ``inf``/``nan``; ``None`` rejects them.
        enc_hook: Passed to msgspec for types it does not know.
        order: msgspec field ordering, ``"deterministic"`` or ``"sorted"``.
    """

    def __init__(
        self,
        *,
        key_strategy: KeyStrategy | None = None,
        date_strategy: DateEncoding | Callable[[Any], Any] = DateEncoding.ISO8601,
        bytes_strategy: BytesEncoding | Callable[[bytes], Any] = BytesEncoding.BASE64,
        non_finite_floats: NonFiniteFloats | None = None,
        enc_hook: Callable[[Any], Any] | None = None,
        order: Literal["deterministic", "sorted"] | None = None,
    ):
        self.key_strategy = key_strategy
        self.date_strategy = date_strategy
        self.bytes_strategy = bytes_strategy
        self.non_finite_floats = non_finite_floats
        self.enc_hook = enc_hook
        self.order = order

    def to_builtins(self, value: Any) -> Any:
        """Reduce ``value`` to JSON-compatible builtins with all strategies applied."""
        try:
            tree = msgspec.to_builtins(
                value,
                builtin_types=_PASSTHROUGH_TYPES,
                str_keys=True,
                enc_hook=self.enc_hook,
                order=self.order,
            )
        except (TypeError, ValueError) as exc:
            raise EncodeError(
                f"Unable to encode {type(value).__name__}: {exc}",
                details={"type": type(value).__name__},
                cause=exc,
            ) from exc
        return self._apply(tree)

    def encode(self, value: Any) -> bytes:
        tree = self.to_builtins(value)
        try:
            return msgspec.json.encode(tree)
        except (TypeError, ValueError) as exc:
            raise EncodeError(
                f"Unable to encode {type(value).__name__} as JSON: {exc}",
                details={"type": type(value).__name__},
                cause=exc,
            ) from exc

    def _apply(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            rename = self.key_strategy
            return {
                (rename(key) if rename is not None else key): self._apply(item)
                for key, item in obj.items()
            }
        if isinstance(obj, (list, tuple)):
            return [self._apply(item) for item in obj]
        if isinstance(obj, (date, time)):
            return encode_date(obj, self.date_strategy)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return encode_bytes(obj, self.bytes_strategy)
        if isinstance(obj, float):
            return encode_float(obj, self.non_finite_floats)
        return obj


class JSONDecoder:
    """Decode JSON payloads into typed values.

    ``key_strategy`` rewrites every incoming object key before the payload is
    matched against ``type``, e.g. ``to_snake_case`` for camelCase services.
    """

    def __init__(
        self,
        *,
        key_strategy: KeyStrategy | None = None,
        date_strategy: DateDecoding = DateDecoding.ISO8601,
        dec_hook: Callable[[type, Any], Any] | None = None,
        strict: bool = True,
    ):
        self.key_strategy = key_strategy
        self.date_strategy = date_strategy
        self.dec_hook = dec_hook
        self.strict = strict

    @property
    def _strict(self) -> bool:
        return self.strict and self.date_strategy is DateDecoding.ISO8601

    def decode(self, data: bytes | str, type: type[T] = Any) -> T:
        try:
            if self.key_strategy is None:
                return msgspec.json.decode(
                    data, type=type, strict=self._strict, dec_hook=self.dec_hook
                )
            obj = self._rekey(msgspec.json.decode(data))
            return msgspec.convert(obj, type=type, strict=self._strict, dec_hook=self.dec_hook)
        except msgspec.DecodeError as exc:
            # msgspec.ValidationError is a DecodeError subclass
            name = getattr(type, "__name__", repr(type))
            raise DecodeError(
                f"Unable to decode {name}: {exc}",
                details={"type": name},
                context={"preview": bytes(data[:200]) if isinstance(data, (bytes, bytearray)) else data[:200]},
                cause=exc,
            ) from exc

    def _rekey(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {self.key_strategy(key): self._rekey(item) for key, item in obj.items()}
        if isinstance(obj, list):
            return [self._rekey(item) for item in obj]
        return obj
