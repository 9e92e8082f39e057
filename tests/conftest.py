"""
Shared fixtures for sanitizer tests.
"""
import pytest

from type_sanitizer.core.config import Settings
from type_sanitizer.core.metrics import get_metrics_collector
from type_sanitizer.services.type_sanitizer import TypeSanitizer


@pytest.fixture(autouse=True)
def reset_metrics():
    """Metrics are a process-wide singleton; start each test from zero."""
    metrics = get_metrics_collector()
    metrics.reset()
    yield metrics
    metrics.reset()


@pytest.fixture
def sanitizer():
    """Sanitizer with fail-hard default, independent of the environment."""
    return TypeSanitizer(Settings(default_failure_policy="fail_hard"))


@pytest.fixture
def lenient_sanitizer():
    """Sanitizer whose default policy returns nulls instead of raising."""
    return TypeSanitizer(Settings(default_failure_policy="null_on_failure"))
