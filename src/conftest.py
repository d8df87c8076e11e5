"""
Shared fixtures for the SurveyHub test suite.
"""

import secrets
import string
import typing as t
from datetime import datetime, timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone

from accounts.models import SurveyUser
from accounts.service.auth import get_token_pair_for_user
from questionnaires import schema
from questionnaires.models import Question, Questionnaire


@pytest.fixture(autouse=True)
def clear_throttle_cache() -> None:
    """Throttle history lives in the cache; start every test with a clean slate."""
    cache.clear()


class SurveyUserFactory:
    """Factory for creating SurveyUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> SurveyUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(10)))
        email = kwargs.pop("email", f"{username}@example.com")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return SurveyUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> SurveyUser:
        return self.create_user(**kwargs)


@pytest.fixture
def survey_user_factory() -> SurveyUserFactory:
    return SurveyUserFactory()


@pytest.fixture
def user(survey_user_factory: SurveyUserFactory) -> SurveyUser:
    """A regular principal who owns questionnaires."""
    return survey_user_factory(username="owner")


@pytest.fixture
def other_user(survey_user_factory: SurveyUserFactory) -> SurveyUser:
    """A regular principal who does not own anything."""
    return survey_user_factory(username="respondent")


@pytest.fixture
def survey_admin(survey_user_factory: SurveyUserFactory) -> SurveyUser:
    """A SurveyHub administrator."""
    return survey_user_factory(username="administrator", is_admin=True)


def bearer_client(user: SurveyUser) -> Client:
    """A test client authenticated as the given user."""
    token = get_token_pair_for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {token.access}")


@pytest.fixture
def auth_client(user: SurveyUser) -> Client:
    return bearer_client(user)


@pytest.fixture
def other_client(other_user: SurveyUser) -> Client:
    return bearer_client(other_user)


@pytest.fixture
def survey_admin_client(survey_admin: SurveyUser) -> Client:
    return bearer_client(survey_admin)


@pytest.fixture
def next_week() -> datetime:
    return timezone.now() + timedelta(days=7)


def make_create_payload(titles: t.Sequence[str] = ("Q1", "Q2"), **kwargs: t.Any) -> schema.QuestionnaireCreateSchema:
    """Build a create payload with one text question per title."""
    return schema.QuestionnaireCreateSchema(
        title=kwargs.pop("title", "Customer feedback"),
        description=kwargs.pop("description", "How did we do?"),
        questions=[schema.QuestionInputSchema(title=title, kind="text") for title in titles],
        **kwargs,
    )


@pytest.fixture
def questionnaire(user: SurveyUser) -> Questionnaire:
    """A draft questionnaire with two questions, owned by ``user``."""
    questionnaire = Questionnaire.objects.create(title="Customer feedback", owner=user)
    Question.objects.create(questionnaire=questionnaire, title="Q1", kind="text", position=0)
    Question.objects.create(questionnaire=questionnaire, title="Q2", kind="rating", position=1)
    return questionnaire


@pytest.fixture
def published_questionnaire(questionnaire: Questionnaire) -> Questionnaire:
    questionnaire.is_published = True
    questionnaire.save()
    return questionnaire
