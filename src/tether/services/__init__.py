# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tether services module exports."""

from .api import API
from .core import Failure, MergePolicy, PendingCall, Result, Success
from .endpoint import APIRequest, EmptyResponse, HTTPMethod
from .settings import TetherSettings
from .transport import HTTPXTransport, Transport, default_transport

__all__ = [
    # Descriptors
    "API",
    "APIRequest",
    "EmptyResponse",
    "HTTPMethod",
    "MergePolicy",
    # Results
    "Result",
    "Success",
    "Failure",
    "PendingCall",
    # Transport types
    "Transport",
    "HTTPXTransport",
    "default_transport",
    "TetherSettings",
]
