"""
pytest configuration and fixtures for all tests
"""

import pytest
import sys
import os

# Make the package importable without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from inputguard.config import Settings
from inputguard.engine import ValidationEngine
from inputguard.rules import build_rule_set
from inputguard.storage import InMemoryStore


# ==================== GLOBAL FIXTURES ====================

class FakeClock:
    """Manually advanced clock for time-window tests"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    """Default settings, independent of the developer's environment"""
    return Settings()


@pytest.fixture
def engine(settings):
    return ValidationEngine(build_rule_set(settings))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryStore(clock=clock)


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "security: marks tests as security tests"
    )


# ==================== REPORTING ====================

def pytest_collection_modifyitems(config, items):
    """Attach markers based on test names"""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)

        if "injection" in item.nodeid or "security" in item.nodeid or "xss" in item.nodeid:
            item.add_marker(pytest.mark.security)
