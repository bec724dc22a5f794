"""Shared fixtures."""

from __future__ import annotations

import pytest

from tests.helpers import FakeClient


@pytest.fixture
def fake_client():
    """Create a fake HTTP client with no scripted replies."""
    return FakeClient()
