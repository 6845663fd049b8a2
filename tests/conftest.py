# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Configuration for all tests - asyncio backend only."""

import pytest

from tether.services.settings import TetherSettings


@pytest.fixture(scope="session")
def anyio_backend():
    """Force tests to run only on asyncio backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the settings singleton so environment changes in a test take effect."""
    TetherSettings.reset_instance()
    yield
    TetherSettings.reset_instance()
