"""Pytest configuration for the test suite."""

from unittest.mock import MagicMock

import pytest
from neo4j import Result


@pytest.fixture
def mock_result():
    """A result cursor whose ``single()`` yields one count record."""
    result = MagicMock(spec=Result)
    result.single.return_value = [0]
    return result


@pytest.fixture
def mock_context(mock_result):
    """Stand-in for a session or transaction; records every ``run`` call."""
    context = MagicMock()
    context.run.return_value = mock_result
    return context
