"""
Shared pytest fixtures for bracket manager tests.

Running tests:
    pytest tests/
"""
import pytest
import random
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.elimination import generate_bracket


class KeepOrder(random.Random):
    """A random generator whose shuffle leaves the list in its given order."""

    def shuffle(self, x):
        pass


@pytest.fixture
def keep_order():
    return KeepOrder()


@pytest.fixture
def four_bracket(keep_order):
    """A,B,C,D seeded in order: A vs B, C vs D, no byes."""
    return generate_bracket(['A', 'B', 'C', 'D'], rng=keep_order)


@pytest.fixture
def five_bracket(keep_order):
    """A..E seeded in order into a bracket of 8: E has a bye, the last match is empty."""
    return generate_bracket(['A', 'B', 'C', 'D', 'E'], rng=keep_order)


@pytest.fixture
def client(monkeypatch):
    """Create a test client with a fresh in-memory tournament store."""
    import app as app_module
    monkeypatch.delenv('BRACKET_SETTINGS_FILE', raising=False)
    app_module.app.config['TESTING'] = True
    app_module.clear_sessions()
    with app_module.app.test_client() as client:
        yield client
    app_module.clear_sessions()
