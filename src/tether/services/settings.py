# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Environment settings using pydantic-settings.

Every field can be set through a ``TETHER_``-prefixed environment variable
or a ``.env`` file, e.g. ``TETHER_TIMEOUT_S=10``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("TetherSettings",)


class TetherSettings(BaseSettings, frozen=True):
    """Transport and logging defaults shared by every API."""

    model_config = SettingsConfigDict(
        env_prefix="TETHER_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport defaults, used when an API builds its own httpx clients
    TIMEOUT_S: float | None = 5.0
    VERIFY_SSL: bool = True
    FOLLOW_REDIRECTS: bool = False
    MAX_CONNECTIONS: int = 100
    MAX_KEEPALIVE_CONNECTIONS: int = 20
    USER_AGENT: str | None = None

    # Logging
    LOG_BODY_PREVIEW_CHARS: int = 2000
    REDACTED_HEADERS: frozenset[str] = Field(
        default=frozenset({"authorization", "proxy-authorization", "x-api-key", "cookie"}),
        description="Header names (case-insensitive) masked in debug logs",
    )

    _instance: ClassVar[Any] = None

    def is_redacted(self, header: str) -> bool:
        return header.lower() in {name.lower() for name in self.REDACTED_HEADERS}

    @classmethod
    def get_instance(cls) -> TetherSettings:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None
