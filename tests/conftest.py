"""Shared pytest fixtures for the TimeScope test suite."""

import pytest

from timescope import ComplexityAnalyzer


@pytest.fixture
def analyzer() -> ComplexityAnalyzer:
    return ComplexityAnalyzer()
