from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from accounts.guard import JWTCredentialVerifier
from accounts.models import SurveyUser

pytestmark = pytest.mark.django_db


@patch("common.management.commands.bootstrap.call_command")
def test_bootstrap_creates_default_principals(mock_call_command: MagicMock) -> None:
    call_command("bootstrap")

    mock_call_command.assert_called_once_with("migrate")

    admin = SurveyUser.objects.get(username="admin")
    assert admin.is_admin and admin.is_superuser
    assert admin.check_password("admin123")
    test_user = SurveyUser.objects.get(username="test")
    assert not test_user.is_admin
    assert test_user.check_password("test123")


@patch("common.management.commands.bootstrap.call_command")
def test_bootstrap_is_idempotent(mock_call_command: MagicMock) -> None:
    call_command("bootstrap")
    call_command("bootstrap")

    assert SurveyUser.objects.filter(username__in=["admin", "test"]).count() == 2


def test_reset_admin_resets_password() -> None:
    SurveyUser.objects.create_user(username="admin", password="forgotten", is_admin=False)

    call_command("reset_admin", "--password", "n3w-secret")

    admin = SurveyUser.objects.get(username="admin")
    assert admin.check_password("n3w-secret")
    assert admin.is_admin is True


def test_reset_admin_creates_missing_account() -> None:
    call_command("reset_admin", "--username", "root", "--password", "s3cret!")

    assert SurveyUser.objects.get(username="root").is_admin is True


def test_get_jwt_prints_a_usable_token_pair() -> None:
    SurveyUser.objects.create_user(username="alice", password="password", is_admin=True)
    out = StringIO()

    call_command("get_jwt", "alice", stdout=out, no_color=True)

    lines = out.getvalue().splitlines()
    assert "Administrator: True" in lines
    access = lines[lines.index("Access Token:") + 1]
    assert lines[lines.index("Refresh Token:") + 1]
    assert JWTCredentialVerifier().verify(access) == "alice"


def test_get_jwt_unknown_user() -> None:
    with pytest.raises(CommandError, match='User "ghost" does not exist'):
        call_command("get_jwt", "ghost")
