"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from tests.helpers import FakeRunner


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()
