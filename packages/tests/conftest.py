"""Pytest configuration and shared fixtures."""

import pytest

# The plugin is registered through a ``pytest11`` entry point for
# consumers.  Here it is disabled (``-p no:chronomock``) and loaded from
# conftest instead, so pytest-cov is already tracing when it is imported.
pytest_plugins = ["chronomock.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may require external services)"
    )
