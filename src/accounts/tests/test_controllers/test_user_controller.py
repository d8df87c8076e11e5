"""Integration tests for registration and login."""

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import SurveyUser

pytestmark = pytest.mark.django_db


def test_register_success(client: Client) -> None:
    url = reverse("api:user-register")
    payload = {"username": "alice", "password": "secret1", "email": "alice@example.com", "phone": "+4366012345"}

    response = client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["username"] == "alice"
    assert body["data"]["is_admin"] is False
    assert body["data"]["created_at"]
    assert "password" not in body["data"]
    assert SurveyUser.objects.get(username="alice").check_password("secret1")


def test_register_duplicate_username(client: Client, user: SurveyUser) -> None:
    url = reverse("api:user-register")
    payload = {"username": user.username, "password": "secret1"}

    response = client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "validation_error",
        "message": "Username already exists.",
        "data": None,
    }


def test_register_invalid_email(client: Client) -> None:
    url = reverse("api:user-register")
    payload = {"username": "bob", "password": "secret1", "email": "not-an-email"}

    response = client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_register_short_password(client: Client) -> None:
    url = reverse("api:user-register")
    response = client.post(
        url, data=orjson.dumps({"username": "bob", "password": "123"}), content_type="application/json"
    )

    assert response.status_code == 400
    assert "too short" in response.json()["message"]


def test_login_success(client: Client, user: SurveyUser) -> None:
    url = reverse("api:user-login")
    payload = {"username": user.username, "password": "password"}

    response = client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == user.id
    assert data["token"]["access"]
    assert data["token"]["refresh"]


def test_login_wrong_password(client: Client, user: SurveyUser) -> None:
    url = reverse("api:user-login")
    payload = {"username": user.username, "password": "wrong"}

    response = client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


def test_login_token_opens_protected_routes(client: Client, user: SurveyUser) -> None:
    login = client.post(
        reverse("api:user-login"),
        data=orjson.dumps({"username": user.username, "password": "password"}),
        content_type="application/json",
    )
    access = login.json()["data"]["token"]["access"]

    response = client.get(
        reverse("api:questionnaire-check-submission"),
        {"questionnaire_id": 1},
        HTTP_AUTHORIZATION=f"Bearer {access}",
    )

    assert response.status_code == 200
    assert response.json()["data"]["has_submitted"] is False
