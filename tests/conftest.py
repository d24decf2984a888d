"""Shared pytest fixtures."""
from datetime import datetime, timedelta

import numpy as np
import pytest

from tsgraph.core.registry import ComponentRegistry
from tsgraph.data import TimeSeries


@pytest.fixture(autouse=True)
def preserve_registry():
    """
    Restore the registry after each test.

    Built-in components register themselves on import, so tests snapshot
    and restore instead of clearing.
    """
    snapshot = ComponentRegistry.snapshot()
    yield
    ComponentRegistry.restore(snapshot)


@pytest.fixture
def start_date():
    return datetime(2024, 1, 1)


@pytest.fixture
def make_series(start_date):
    """Factory: TimeSeries with daily timestamps from an offset in days."""

    def _make(values, title='', offset=0):
        stamps = [start_date + timedelta(days=offset + i) for i in range(len(values))]
        return TimeSeries.from_arrays(stamps, list(values), title=title)

    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
