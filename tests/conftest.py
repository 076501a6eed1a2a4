"""Shared pytest fixtures for brickORM unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from brickorm.settings import get_settings
from tests.fixtures import RecordingExecutor


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Drop cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def executor() -> RecordingExecutor:
    return RecordingExecutor()
