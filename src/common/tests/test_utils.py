"""Tests for the transactional write helpers."""

from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError, OperationalError
from django.test import RequestFactory

from accounts.models import SurveyUser
from common.conf import CoreConfig
from common.exceptions import NotFoundError, TransactionError
from common.utils import atomic_write, get_client_ip, retry_on_transient_errors

FAST = CoreConfig(transient_retry_attempts=3, transient_retry_backoff=0)


def test_get_client_ip_prefers_forwarded_for() -> None:
    request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", REMOTE_ADDR="10.0.0.1")
    assert get_client_ip(request) == "203.0.113.7"


def test_get_client_ip_falls_back_to_remote_addr() -> None:
    request = RequestFactory().get("/", REMOTE_ADDR="192.0.2.10")
    assert get_client_ip(request) == "192.0.2.10"


@patch("common.utils.should_retry", return_value=True)
def test_retry_replays_transient_errors(mock_should_retry: MagicMock) -> None:
    fn = MagicMock(side_effect=[OperationalError("database is locked"), "done"])
    fn.__qualname__ = "flaky"

    assert retry_on_transient_errors(FAST)(fn)() == "done"
    assert fn.call_count == 2


@patch("common.utils.should_retry", return_value=True)
def test_retry_gives_up_after_configured_attempts(mock_should_retry: MagicMock) -> None:
    fn = MagicMock(side_effect=OperationalError("database is locked"))
    fn.__qualname__ = "always_locked"

    with pytest.raises(OperationalError):
        retry_on_transient_errors(FAST)(fn)()
    assert fn.call_count == 3


def test_retry_does_not_replay_business_errors() -> None:
    fn = MagicMock(side_effect=NotFoundError())
    fn.__qualname__ = "missing"

    with pytest.raises(NotFoundError):
        retry_on_transient_errors(FAST)(fn)()
    assert fn.call_count == 1


@pytest.mark.django_db
def test_atomic_write_rolls_back_and_wraps_store_errors() -> None:
    def write_two_users() -> None:
        SurveyUser.objects.create_user(username="first", password="secret1")
        raise DatabaseError("disk full")

    with pytest.raises(TransactionError) as exc_info:
        atomic_write(write_two_users)

    assert "disk full" not in exc_info.value.message
    assert isinstance(exc_info.value.reason, DatabaseError)
    assert exc_info.value.status_code == 500
    assert not SurveyUser.objects.filter(username="first").exists()


@pytest.mark.django_db
def test_atomic_write_lets_business_errors_through_and_rolls_back() -> None:
    def write_then_fail() -> None:
        SurveyUser.objects.create_user(username="first", password="secret1")
        raise NotFoundError("gone")

    with pytest.raises(NotFoundError, match="gone"):
        atomic_write(write_then_fail)

    assert not SurveyUser.objects.filter(username="first").exists()


@pytest.mark.django_db
def test_atomic_write_uses_the_bound_service_config() -> None:
    class Service:
        config = CoreConfig(transient_retry_attempts=1, transient_retry_backoff=0)

        def write(self, username: str) -> SurveyUser:
            return SurveyUser.objects.create_user(username=username, password="secret1")

    user = atomic_write(Service().write, "bound")
    assert user.username == "bound"
