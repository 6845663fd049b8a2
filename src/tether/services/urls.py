# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""URL assembly: path joining, placeholder substitution, query merging."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from tether.errors import InvalidURLError

__all__ = ("placeholders", "fill_path", "build_url")

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


def placeholders(path: str) -> list[str]:
    """Names of the ``{name}`` tokens in ``path``, in order."""
    return _PLACEHOLDER.findall(path)


def _path_segment(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(_path_segment(item) for item in value)
    return str(value)


def fill_path(path: str, values: Mapping[str, Any]) -> str:
    """Replace every placeholder with the percent-encoded value of the same name."""

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            raise InvalidURLError(
                f"No value for path placeholder {{{name}}}",
                details={"path": path, "placeholder": name},
            )
        return quote(_path_segment(values[name]), safe="")

    return _PLACEHOLDER.sub(substitute, path)


def build_url(base_url: str, path: str, params: Mapping[str, Any]) -> httpx.URL:
    """Append ``path`` to ``base_url`` and merge ``params`` into its query.

    Exactly one ``/`` separates base and path. Query items already on the
    base URL are kept.
    """
    try:
        url = httpx.URL(base_url)
        if path:
            url = url.copy_with(path=url.path.rstrip("/") + "/" + path.lstrip("/"))
        if params:
            url = url.copy_merge_params(params)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidURLError(
            f"Malformed request URL: {e}",
            details={"base_url": base_url, "path": path},
            cause=e,
        ) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(
            f"Request URL must be absolute http(s): {url}",
            details={"base_url": base_url, "path": path},
        )
    return url
