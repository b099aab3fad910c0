"""
Integration tests for log routes.

Tests GET /logs and GET /logs/{log_id}/payload through the FastAPI app with the
query service overridden. Verifies the response shapes, the 404/500 mapping,
and the function key check.
"""
import pytest
from unittest.mock import MagicMock, patch

from api_logger.core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from api_logger.schemas.logs import AttemptRecord


@pytest.mark.integration
class TestListLogs:

    def test_returns_records(self, client, mock_query_service, sample_attempt_row, sample_failed_row):
        mock_query_service.list_attempts.return_value = [
            AttemptRecord.from_row(sample_attempt_row),
            AttemptRecord.from_row(sample_failed_row),
        ]

        response = client.get("/logs", params={"from": "20240101", "to": "20240101"})

        assert response.status_code == 200
        data = response.json()
        assert [r["rowKey"] for r in data] == [sample_attempt_row["row_key"], sample_failed_row["row_key"]]
        assert set(data[0]) >= {"partitionKey", "rowKey", "success", "timestamp", "eTag", "payloadId"}
        assert data[1]["success"] is False
        mock_query_service.list_attempts.assert_awaited_once_with("20240101", "20240101")

    def test_empty_range(self, client, mock_query_service):
        response = client.get("/logs", params={"from": "2024-01-01", "to": "2024-01-02"})

        assert response.status_code == 200
        assert response.json() == []

    def test_malformed_date_is_500_without_body(self, client, mock_query_service):
        mock_query_service.list_attempts.side_effect = ValidationError("invalid date")

        response = client.get("/logs", params={"from": "garbage", "to": "20240101"})

        assert response.status_code == 500
        assert response.content == b""

    def test_missing_params_is_500(self, client, mock_query_service):
        mock_query_service.list_attempts.side_effect = ValidationError("date value is required")

        response = client.get("/logs")

        assert response.status_code == 500
        mock_query_service.list_attempts.assert_awaited_once_with(None, None)

    def test_store_failure_is_500(self, client, mock_query_service):
        mock_query_service.list_attempts.side_effect = StoreUnavailableError("attempt_log", "down")

        response = client.get("/logs", params={"from": "20240101", "to": "20240101"})

        assert response.status_code == 500


@pytest.mark.integration
class TestGetPayload:

    def test_returns_raw_text(self, client, mock_query_service):
        mock_query_service.get_payload.return_value = '{"count": 1}'

        response = client.get("/logs/blob-1/payload")

        assert response.status_code == 200
        assert response.text == '{"count": 1}'
        assert response.headers["content-type"].startswith("text/plain")
        mock_query_service.get_payload.assert_awaited_once_with("blob-1")

    def test_nonexistent_is_404(self, client, mock_query_service):
        mock_query_service.get_payload.side_effect = NotFoundError("nonexistent-id")

        response = client.get("/logs/nonexistent-id/payload")

        assert response.status_code == 404

    def test_store_failure_is_500(self, client, mock_query_service):
        mock_query_service.get_payload.side_effect = StoreUnavailableError("payload", "down")

        response = client.get("/logs/blob-1/payload")

        assert response.status_code == 500
        assert response.content == b""


@pytest.mark.integration
class TestFunctionKey:

    @pytest.fixture
    def keyed(self):
        with patch("api_logger.core.auth.settings", MagicMock(function_key="secret")):
            yield

    def test_no_key_configured_passes_through(self, client):
        response = client.get("/logs/blob-1/payload")
        assert response.status_code == 200

    def test_missing_key_rejected(self, client, keyed, mock_query_service):
        response = client.get("/logs/blob-1/payload")

        assert response.status_code == 401
        mock_query_service.get_payload.assert_not_awaited()

    def test_wrong_key_rejected(self, client, keyed):
        response = client.get("/logs/blob-1/payload", headers={"x-functions-key": "nope"})
        assert response.status_code == 401

    def test_header_key_accepted(self, client, keyed):
        response = client.get("/logs/blob-1/payload", headers={"x-functions-key": "secret"})
        assert response.status_code == 200

    def test_query_code_accepted(self, client, keyed):
        response = client.get(
            "/logs", params={"from": "20240101", "to": "20240101", "code": "secret"}
        )
        assert response.status_code == 200

    def test_health_not_protected(self, client, keyed):
        assert client.get("/health").status_code == 200
