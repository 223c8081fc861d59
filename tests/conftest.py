"""Shared pytest fixtures for apierror test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a demo-service test client for contract suites."""
    from apierror.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    from apierror.core.config import get_error_handling_settings

    get_error_handling_settings.cache_clear()
    yield
    get_error_handling_settings.cache_clear()
