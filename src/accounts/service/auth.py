"""Authentication service layer."""

import structlog
from django.contrib.auth import authenticate
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts import schema
from accounts.exceptions import InvalidLoginError
from accounts.guard import USERNAME_CLAIM
from accounts.models import SurveyUser

logger = structlog.get_logger(__name__)


def get_token_pair_for_user(user: SurveyUser) -> schema.TokenPairSchema:
    """Issue an access/refresh token pair carrying the username and admin claims."""
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    token = RefreshToken.for_user(user)
    token.payload.update({USERNAME_CLAIM: user.username, "is_admin": user.is_admin})
    logger.info("token_pair_generated", user_id=user.id)
    return schema.TokenPairSchema(access=str(token.access_token), refresh=str(token))  # type: ignore[attr-defined]


def login(username: str, password: str) -> tuple[SurveyUser, schema.TokenPairSchema]:
    """Check the credentials and issue a token pair.

    Raises:
        InvalidLoginError: If the username is unknown or the password does not match.
    """
    user = authenticate(username=username, password=password)
    if user is None:
        logger.warning("login_failed", username=username)
        raise InvalidLoginError()
    assert isinstance(user, SurveyUser)
    logger.info("login_succeeded", user_id=user.id)
    return user, get_token_pair_for_user(user)
