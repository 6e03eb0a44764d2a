"""Pytest configuration and shared fixtures."""

import pytest

from helpers import FakeSender


@pytest.fixture
def sender():
    return FakeSender()
