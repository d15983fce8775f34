"""
Tests for exception handlers in main.py.
"""
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from checkin.core.exceptions import ConflictError, NotFoundError, ValidationError
from checkin.main import create_application


@pytest.fixture
def failing_client():
    """App with routes that raise each kind of error."""
    app = create_application()

    @app.get("/boom/conflict")
    def conflict():
        raise ConflictError("Already done today.")

    @app.get("/boom/not-found")
    def not_found():
        raise NotFoundError("Nothing here.")

    @app.get("/boom/validation")
    def validation():
        raise ValidationError(
            "Bad answers.", errors=[{"field": "answers", "question_id": 3, "message": "x"}]
        )

    @app.get("/boom/http")
    def http():
        raise HTTPException(status_code=503, detail="Down for maintenance")

    @app.get("/boom/unexpected")
    def unexpected():
        raise RuntimeError("secret internals")

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


class TestDomainErrors:
    def test_conflict(self, failing_client):
        response = failing_client.get("/boom/conflict")

        assert response.status_code == 409
        assert response.json() == {"detail": "Already done today.", "code": "CONFLICT"}

    def test_not_found(self, failing_client):
        response = failing_client.get("/boom/not-found")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_validation_carries_errors(self, failing_client):
        response = failing_client.get("/boom/validation")

        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "answers", "question_id": 3, "message": "x"}
        ]

    def test_domain_errors_are_not_sent_to_sentry(self, failing_client):
        with patch("checkin.main.capture_error") as capture:
            failing_client.get("/boom/conflict")

        capture.assert_not_called()


class TestServerErrors:
    def test_http_5xx_is_captured(self, failing_client):
        with patch("checkin.main.capture_error") as capture:
            response = failing_client.get("/boom/http")

        assert response.status_code == 503
        assert response.json() == {"detail": "Down for maintenance"}
        capture.assert_called_once()

    def test_unexpected_error_is_generic(self, failing_client):
        with patch("checkin.main.capture_error") as capture:
            response = failing_client.get("/boom/unexpected")

        assert response.status_code == 500
        data = response.json()
        assert data["detail"] == "Internal server error"
        assert data["error_id"]
        assert "secret" not in response.text
        capture.assert_called_once()


class TestRequestValidation:
    def test_request_validation_shape(self, client, auth_headers):
        response = client.post("/v1/checkins", json={}, headers=auth_headers)

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert {tuple(e["loc"]) for e in data["detail"]} >= {("body", "quiz_id")}
