"""
Pytest configuration and shared fixtures.
"""

from collections.abc import Generator

import pytest
from prometheus_client import CollectorRegistry

from admission_queue.config import Settings, get_settings
from admission_queue.observability.metrics import MetricsCollector
from admission_queue.queue import KeyedQueue, UnkeyedQueue


@pytest.fixture
def registry() -> CollectorRegistry:
    """Create an isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricsCollector:
    """Create a metrics collector bound to the isolated registry."""
    return MetricsCollector(registry=registry)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        default_pool_size=2,
        default_batch_size=3,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def clear_settings_cache() -> Generator[None]:
    """Reset the cached settings around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def keyed_queue() -> KeyedQueue[str, int]:
    """Create an empty keyed queue with two slots."""
    return KeyedQueue.empty(2)


@pytest.fixture
def unkeyed_queue() -> UnkeyedQueue[str]:
    """Create an empty unkeyed queue releasing two items per start."""
    return UnkeyedQueue.empty(2)
