"""test_models.py: Unit tests for the accounts models."""

import pytest

from accounts.models import SurveyUser, SurveyUserQueryset

pytestmark = pytest.mark.django_db


def test_surveyuser_creation_with_default_values() -> None:
    user = SurveyUser.objects.create_user(username="test_user", password="password")
    assert user.phone == ""
    assert user.email is None
    assert user.is_admin is False


def test_surveyuser_blank_email_is_stored_as_null() -> None:
    """Several users without email must not collide on the unique constraint."""
    first = SurveyUser.objects.create_user(username="first", email="", password="password")
    second = SurveyUser.objects.create_user(username="second", email="", password="password")
    assert first.email is None
    assert second.email is None


def test_surveyuser_manager_get_queryset() -> None:
    queryset = SurveyUser.objects.get_queryset()
    assert isinstance(queryset, SurveyUserQueryset)


def test_admins_queryset() -> None:
    SurveyUser.objects.create_user(username="regular", password="password")
    boss = SurveyUser.objects.create_user(username="boss", password="password", is_admin=True)

    assert list(SurveyUser.objects.admins()) == [boss]


def test_create_superuser_is_admin() -> None:
    superuser = SurveyUser.objects.create_superuser(username="root", password="password")
    assert superuser.is_admin is True
    assert superuser.is_staff is True


def test_display_name_falls_back_to_username() -> None:
    user = SurveyUser.objects.create_user(username="anon", password="password")
    assert user.display_name == "anon"

    user.first_name, user.last_name = "Ada", "Lovelace"
    assert user.display_name == "Ada Lovelace"
