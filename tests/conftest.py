"""Global pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from nestspec.results import ResultCollector


@pytest.fixture
def results() -> ResultCollector:
    """Empty collector for a single test."""
    return ResultCollector()
