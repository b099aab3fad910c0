"""
Pytest configuration and shared fixtures for API Logger tests.

Provides mock Supabase clients, mocked stores and services, and sample rows.
"""
import os

os.environ.setdefault("AUTO_START_CELERY", "false")
os.environ.setdefault("POLL_EXCLUSIVE", "false")

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
def client(mock_query_service):
    """Test client with the query service overridden; Celery auto-start is off."""
    from api_logger.main import app
    from api_logger.container import get_query_service

    app.dependency_overrides[get_query_service] = lambda: mock_query_service
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from api_logger.core.config import Settings
    return Settings(
        public_api_url="https://public.example.test/random",
        public_api_timeout=5,
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-supabase-key",
        attempt_log_table="api_attempt_log",
        attempt_log_page_size=2,
        payload_bucket="payloadforsuccess",
    )


# ---------------------------------------------------------------------------
# Supabase (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_table():
    """Chained PostgREST query builder."""
    table = MagicMock()
    for method in ("select", "insert", "gte", "lt", "order", "range"):
        getattr(table, method).return_value = table
    table.execute.return_value = MagicMock(data=[])
    return table


@pytest.fixture
def mock_bucket_api():
    """Supabase Storage file API for one bucket."""
    api = MagicMock()
    api.upload.return_value = MagicMock()
    api.download.return_value = b""
    api.exists.return_value = False
    return api


@pytest.fixture
def mock_supabase_client(mock_table, mock_bucket_api):
    """Mocked SupabaseClient wrapper."""
    client = MagicMock()
    client.client.table.return_value = mock_table
    client.client.storage.from_.return_value = mock_bucket_api
    client.client.storage.list_buckets.return_value = []
    return client


# ---------------------------------------------------------------------------
# Stores and services (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_attempt_store():
    """Mocked AttemptLogStore."""
    store = MagicMock()
    store.ensure_exists = AsyncMock()
    store.append = AsyncMock()
    store.latest = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_payload_store():
    """Mocked PayloadStore."""
    store = MagicMock()
    store.ensure_exists = AsyncMock()
    store.put = AsyncMock()
    store.get = AsyncMock(return_value="")
    store.exists = AsyncMock(return_value=False)
    return store


@pytest.fixture
def mock_public_api_client():
    """Mocked PublicApiClient."""
    client = MagicMock()
    client.fetch = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def mock_query_service():
    """Mocked QueryService."""
    svc = MagicMock()
    svc.list_attempts = AsyncMock(return_value=[])
    svc.get_payload = AsyncMock(return_value="")
    return svc


# ---------------------------------------------------------------------------
# Sample test data
# ---------------------------------------------------------------------------

@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_attempt_row():
    """Attempt log row as returned by PostgREST."""
    return {
        "partition_key": "20240101",
        "row_key": "7f1c3a52-0d7e-4c0e-9a57-1a2b3c4d5e6f",
        "success": True,
        "timestamp": "2024-01-01T12:30:00+00:00",
        "payload_id": "c0ffee00-1111-4222-8333-444455556666",
        "status_code": 200,
    }


@pytest.fixture
def sample_failed_row():
    return {
        "partition_key": "20240101",
        "row_key": "0a0b0c0d-0000-4000-8000-000000000001",
        "success": False,
        "timestamp": "2024-01-01T12:31:00+00:00",
        "payload_id": None,
        "status_code": 503,
    }
