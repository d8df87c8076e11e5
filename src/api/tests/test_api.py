"""Tests for the API surface: health, error envelopes and request tracing."""

from unittest.mock import MagicMock, patch

import pytest
from django.conf import settings
from django.test.client import Client
from django.urls import reverse
from ninja_extra.exceptions import Throttled

pytestmark = pytest.mark.django_db


def test_health(client: Client) -> None:
    response = client.get(reverse("api:health"))

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "", "data": {"status": "ok", "version": settings.VERSION}}


def test_request_id_is_echoed(client: Client) -> None:
    response = client.get(reverse("api:health"), HTTP_X_REQUEST_ID="trace-123")

    assert response["X-Request-ID"] == "trace-123"


def test_request_id_is_generated(client: Client) -> None:
    response = client.get(reverse("api:health"))

    assert len(response["X-Request-ID"]) == 36


def test_malformed_query_parameter(client: Client) -> None:
    response = client.get(reverse("api:questionnaire-detail"), {"id": "abc"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "validation_error"
    assert body["data"] is None
    assert "id" in body["message"]


@patch("questionnaires.controllers.lifecycle.get", side_effect=RuntimeError("boom"))
def test_unexpected_errors_are_hidden(mock_get: MagicMock, client: Client) -> None:
    response = client.get(reverse("api:questionnaire-detail"), {"id": 1})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "internal_error",
        "message": "Internal server error.",
        "data": None,
    }
    assert "boom" not in response.content.decode()


@patch("questionnaires.controllers.reports.public_stats", side_effect=Throttled(wait=30))
def test_throttled_requests(mock_stats: MagicMock, client: Client) -> None:
    response = client.get(reverse("api:questionnaire-stats"))

    assert response.status_code == 429
    assert response.json()["error"] == "throttled"
    assert "30 seconds" in response.json()["message"]
