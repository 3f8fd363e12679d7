"""Pytest configuration and shared fixtures."""
import pytest

import pathstore.config as config_module
from pathstore import PathStore


class Recorder:
    """Zero-argument listener that counts its calls."""

    def __init__(self, name: str = "listener"):
        self.name = name
        self.calls = 0

    def __call__(self):
        self.calls += 1

    def __repr__(self):
        return f"Recorder({self.name!r}, calls={self.calls})"


@pytest.fixture(autouse=True)
def reset_default_config():
    """Restore the process default config after each test."""
    original = config_module._default_config
    yield
    config_module._default_config = original


@pytest.fixture
def recorder():
    """Factory for named recording listeners."""
    return Recorder


@pytest.fixture
def cart_state():
    """Sample state with a nested cart and an unrelated user field."""
    return {
        'cart': {'price': 10, 'items': [{'sku': 'A1', 'qty': 1}]},
        'user': {'name': 'Ada'},
    }


@pytest.fixture
def store(cart_state):
    """A PathStore built from cart_state."""
    return PathStore(cart_state)
