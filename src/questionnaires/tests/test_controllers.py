"""Integration tests for the questionnaire endpoints."""

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import SurveyUser
from conftest import bearer_client
from questionnaires.models import Answer, Question, Questionnaire, Submission

pytestmark = pytest.mark.django_db


def create_body(titles: list[str], **extra: object) -> bytes:
    return orjson.dumps(
        {
            "title": "Team survey",
            "description": "Quarterly check-in",
            "questions": [
                {"title": title, "kind": "single", "required": True, "options": '["yes", "no"]'} for title in titles
            ],
            **extra,
        }
    )


def test_full_questionnaire_flow(auth_client: Client, user: SurveyUser, other_client: Client) -> None:
    response = auth_client.post(
        reverse("api:questionnaire-create"), data=create_body(["a", "b", "c"]), content_type="application/json"
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    questionnaire_id = body["data"]["questionnaire"]["id"]
    assert body["data"]["questionnaire"]["created_by"] == user.id
    assert [q["position"] for q in body["data"]["questions"]] == [0, 1, 2]
    assert Question.objects.filter(questionnaire_id=questionnaire_id).count() == 3

    question_ids = [q["id"] for q in body["data"]["questions"]]
    submit_body = orjson.dumps(
        {
            "questionnaire_id": questionnaire_id,
            "answers": [{"question_id": qid, "content": "yes"} for qid in question_ids],
        }
    )
    response = other_client.post(reverse("api:questionnaire-submit"), data=submit_body, content_type="application/json")
    assert response.status_code == 201

    response = other_client.post(reverse("api:questionnaire-submit"), data=submit_body, content_type="application/json")
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    assert Submission.objects.filter(questionnaire_id=questionnaire_id).count() == 1

    response = auth_client.delete(reverse("api:questionnaire-delete") + f"?id={questionnaire_id}")
    assert response.status_code == 200
    summary = response.json()["data"]
    assert summary == {"questionnaire_id": questionnaire_id, "questions": 3, "answers": 3, "submissions": 1}
    assert not Question.objects.filter(questionnaire_id=questionnaire_id).exists()
    assert not Answer.objects.filter(question_id__in=question_ids).exists()
    assert not Submission.objects.filter(questionnaire_id=questionnaire_id).exists()


def test_create_requires_authentication(client: Client) -> None:
    url = reverse("api:questionnaire-create")
    response = client.post(url, data=create_body(["a"]), content_type="application/json")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "unauthenticated",
        "message": "Authentication required.",
        "data": None,
    }


def test_create_rejects_invalid_token(client: Client) -> None:
    response = client.post(
        reverse("api:questionnaire-create"),
        data=create_body(["a"]),
        content_type="application/json",
        HTTP_AUTHORIZATION="Bearer garbage",
    )

    assert response.status_code == 401


def test_create_for_someone_else_is_forbidden(auth_client: Client, other_user: SurveyUser) -> None:
    response = auth_client.post(
        reverse("api:questionnaire-create"),
        data=create_body(["a"], created_by=other_user.id),
        content_type="application/json",
    )

    assert response.status_code == 403
    assert not Questionnaire.objects.exists()


def test_create_without_questions(auth_client: Client) -> None:
    url = reverse("api:questionnaire-create")
    response = auth_client.post(url, data=create_body([]), content_type="application/json")

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_create_with_missing_title(auth_client: Client) -> None:
    body = orjson.dumps({"questions": [{"title": "a", "kind": "text"}]})

    response = auth_client.post(reverse("api:questionnaire-create"), data=body, content_type="application/json")

    assert response.status_code == 400
    assert "title" in response.json()["message"]


def test_list_anonymous_and_owner(client: Client, auth_client: Client, user: SurveyUser) -> None:
    Questionnaire.objects.create(title="Published", owner=user, is_published=True)
    Questionnaire.objects.create(title="Draft", owner=user)

    anonymous = client.get(reverse("api:questionnaire-list")).json()["data"]
    owner = auth_client.get(reverse("api:questionnaire-list")).json()["data"]

    assert [item["questionnaire"]["title"] for item in anonymous["questionnaires"]] == ["Published"]
    assert [item["questionnaire"]["title"] for item in owner["questionnaires"]] == ["Draft", "Published"]
    assert owner["questionnaires"][0]["creator_name"] == user.username


def test_list_clamps_pagination(client: Client) -> None:
    response = client.get(reverse("api:questionnaire-list"), {"page": 0, "page_size": -5})

    data = response.json()["data"]
    assert (data["page"], data["page_size"], data["total"]) == (1, 10, 0)


def test_detail(client: Client, questionnaire: Questionnaire) -> None:
    response = client.get(reverse("api:questionnaire-detail"), {"id": questionnaire.id})

    assert response.status_code == 200
    assert [q["title"] for q in response.json()["data"]["questions"]] == ["Q1", "Q2"]


def test_detail_not_found(client: Client) -> None:
    response = client.get(reverse("api:questionnaire-detail"), {"id": 999_999})

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_update_by_non_owner_changes_nothing(other_client: Client, questionnaire: Questionnaire) -> None:
    before = list(Question.objects.filter(questionnaire=questionnaire).values_list("id", "title"))
    body = create_body(["x"], id=questionnaire.id)

    response = other_client.put(reverse("api:questionnaire-update"), data=body, content_type="application/json")

    assert response.status_code == 403
    assert list(Question.objects.filter(questionnaire=questionnaire).values_list("id", "title")) == before


def test_update_published_is_rejected(auth_client: Client, published_questionnaire: Questionnaire) -> None:
    body = create_body(["x"], id=published_questionnaire.id)

    response = auth_client.put(reverse("api:questionnaire-update"), data=body, content_type="application/json")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_state"


def test_update_replaces_questions(auth_client: Client, questionnaire: Questionnaire) -> None:
    body = create_body(["x", "y", "z"], id=questionnaire.id)

    response = auth_client.put(reverse("api:questionnaire-update"), data=body, content_type="application/json")

    assert response.status_code == 200
    assert [q["title"] for q in response.json()["data"]["questions"]] == ["x", "y", "z"]


def test_update_status(auth_client: Client, other_client: Client, questionnaire: Questionnaire) -> None:
    url = reverse("api:questionnaire-update-status")
    body = orjson.dumps({"id": questionnaire.id, "is_published": True})

    assert other_client.put(url, data=body, content_type="application/json").status_code == 403

    response = auth_client.put(url, data=body, content_type="application/json")
    assert response.status_code == 200
    assert response.json()["message"] == "Questionnaire published."
    assert response.json()["data"]["is_published"] is True


def test_delete_by_non_owner(other_client: Client, questionnaire: Questionnaire) -> None:
    response = other_client.delete(reverse("api:questionnaire-delete") + f"?id={questionnaire.id}")

    assert response.status_code == 403
    assert Questionnaire.objects.filter(pk=questionnaire.id).exists()


def test_submit_as_someone_else_is_forbidden(
    auth_client: Client, other_user: SurveyUser, questionnaire: Questionnaire
) -> None:
    body = orjson.dumps({"questionnaire_id": questionnaire.id, "user_id": other_user.id, "answers": []})

    response = auth_client.post(reverse("api:questionnaire-submit"), data=body, content_type="application/json")

    assert response.status_code == 403
    assert not Submission.objects.exists()


def test_submit_records_forwarded_ip(other_client: Client, questionnaire: Questionnaire) -> None:
    body = orjson.dumps({"questionnaire_id": questionnaire.id, "answers": []})

    response = other_client.post(
        reverse("api:questionnaire-submit"),
        data=body,
        content_type="application/json",
        HTTP_X_FORWARDED_FOR="198.51.100.4, 10.0.0.1",
    )

    assert response.status_code == 201
    assert response.json()["data"]["ip_address"] == "198.51.100.4"


def test_submit_to_missing_questionnaire(other_client: Client) -> None:
    body = orjson.dumps({"questionnaire_id": 999_999, "answers": []})

    response = other_client.post(reverse("api:questionnaire-submit"), data=body, content_type="application/json")

    assert response.status_code == 404


def test_check_submission(other_client: Client, other_user: SurveyUser, questionnaire: Questionnaire) -> None:
    url = reverse("api:questionnaire-check-submission")
    assert other_client.get(url, {"questionnaire_id": questionnaire.id}).json()["data"] == {
        "has_submitted": False,
        "submission": None,
    }

    other_client.post(
        reverse("api:questionnaire-submit"),
        data=orjson.dumps({"questionnaire_id": questionnaire.id, "answers": []}),
        content_type="application/json",
    )

    data = other_client.get(url, {"questionnaire_id": questionnaire.id}).json()["data"]
    assert data["has_submitted"] is True
    assert data["submission"]["user_id"] == other_user.id


def test_results_permissions(
    auth_client: Client, other_client: Client, survey_admin_client: Client, questionnaire: Questionnaire
) -> None:
    url = reverse("api:questionnaire-results")

    assert auth_client.get(url, {"id": questionnaire.id}).status_code == 200
    assert survey_admin_client.get(url, {"id": questionnaire.id}).status_code == 200
    assert other_client.get(url, {"id": questionnaire.id}).status_code == 403


def test_results_content(auth_client: Client, other_user: SurveyUser, questionnaire: Questionnaire) -> None:
    q1 = Question.objects.get(questionnaire=questionnaire, position=0)
    bearer_client(other_user).post(
        reverse("api:questionnaire-submit"),
        data=orjson.dumps({"questionnaire_id": questionnaire.id, "answers": [{"question_id": q1.id, "content": "42"}]}),
        content_type="application/json",
    )

    data = auth_client.get(reverse("api:questionnaire-results"), {"id": questionnaire.id}).json()["data"]

    assert data["total_submissions"] == 1
    (entry,) = data["submissions"]
    assert entry["user_info"]["username"] == other_user.username
    assert [a["content"] for a in entry["answers"]] == ["42"]


def test_public_stats(client: Client, questionnaire: Questionnaire) -> None:
    response = client.get(reverse("api:questionnaire-stats"))

    assert response.status_code == 200
    assert response.json()["data"] == {"user_count": 1, "questionnaire_count": 1, "submission_count": 0}


def test_admin_questionnaire_reports(
    survey_admin_client: Client, other_client: Client, questionnaire: Questionnaire
) -> None:
    other_client.post(
        reverse("api:questionnaire-submit"),
        data=orjson.dumps({"questionnaire_id": questionnaire.id, "answers": []}),
        content_type="application/json",
    )

    listing = survey_admin_client.get(reverse("api:admin-questionnaires")).json()["data"]
    details = survey_admin_client.get(reverse("api:admin-questionnaire-submissions"), {"id": questionnaire.id})
    statistics = survey_admin_client.get(reverse("api:admin-statistics")).json()["data"]

    assert listing["questionnaires"][0]["submission_count"] == 1
    assert details.status_code == 200
    assert len(details.json()["data"]["submissions"]) == 1
    assert statistics["submission_statistics"]["total_submissions"] == 1
    assert statistics["user_statistics"]["admin_users"] == 1
