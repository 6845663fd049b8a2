# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Core value types shared by the executor: results, merge policy, pending calls."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar, Union

import msgspec

from tether.errors import TetherError

__all__ = ("MergePolicy", "Success", "Failure", "Result", "PendingCall", "merge")

T = TypeVar("T")
V = TypeVar("V")


class MergePolicy(str, Enum):
    """Which side wins when a request value and an API default share a key."""

    REQUEST_WINS = "request_wins"
    API_WINS = "api_wins"


def merge(
    request_values: Mapping[str, V],
    api_defaults: Mapping[str, V],
    policy: MergePolicy,
    *,
    normalize: Callable[[str], str] | None = None,
) -> dict[str, V]:
    """Union of both mappings, resolving collisions per ``policy``.

    ``normalize`` maps keys to a comparison form (e.g. ``str.lower`` for
    header names); the winning side's spelling of the key is kept.
    """
    if policy is MergePolicy.REQUEST_WINS:
        low, high = api_defaults, request_values
    else:
        low, high = request_values, api_defaults
    if normalize is None:
        return {**low, **high}
    merged: dict[str, tuple[str, V]] = {}
    for layer in (low, high):
        for key, value in layer.items():
            merged[normalize(key)] = (key, value)
    return dict(merged.values())


class Success(msgspec.Struct, Generic[T], frozen=True):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


class Failure(msgspec.Struct, frozen=True):
    error: TetherError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Success[T], Failure]


class PendingCall:
    """Handle for a callback-style call running on a worker thread.

    ``cancel()`` is cooperative: it is honoured if observed before the request
    is dispatched or after the response arrives, in which case the callback
    receives ``Failure(CancelledError)``. A transfer already in flight is not
    interrupted.
    """

    def __init__(self, target: Callable[[PendingCall], None], *, name: str | None = None):
        self._cancelled = threading.Event()
        self._done = threading.Event()
        self._target = target
        self._thread = threading.Thread(target=self._run, name=name or "tether-call", daemon=True)

    def start(self) -> PendingCall:
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._target(self)
        finally:
            self._done.set()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the callback has run; returns False on timeout."""
        return self._done.wait(timeout)
