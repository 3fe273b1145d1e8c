"""Pytest configuration and shared fixtures."""
import pytest

from gimme import Registry, RegistrySettings, reset_registry


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "concurrency: mark test as exercising threads")


@pytest.fixture
def registry():
    """Fresh thread-safe registry."""
    return Registry(RegistrySettings())


@pytest.fixture
def confined_registry():
    """Registry confined to the test thread."""
    return Registry(RegistrySettings(thread_safe=False))


@pytest.fixture(autouse=True)
def _reset_default_registry():
    reset_registry()
    yield
    reset_registry()
