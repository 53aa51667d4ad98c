"""Shared test fixtures for the dashboard tests."""

import threading
from datetime import datetime, timezone

import pytest


@pytest.fixture
def gate():
    event = threading.Event()
    yield event
    # Release any worker thread still parked on the gate.
    event.set()


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
