"""Access Guard: resolves bearer credentials to principals and decides what they may do.

Credential cryptography is delegated to a pluggable ``CredentialVerifier`` which only has to
turn an opaque bearer string into a username. The guard then looks the username up in the
principal directory and answers two predicates, "owns this entity" and "is an administrator",
combined into explicit capabilities.
"""

import enum
import typing as t

import structlog
from django.utils.module_loading import import_string
from ninja_jwt.exceptions import TokenError
from ninja_jwt.tokens import AccessToken

from accounts.exceptions import InvalidCredentialError
from accounts.models import SurveyUser
from common.conf import CoreConfig, get_core_config
from common.exceptions import ForbiddenError, UnauthenticatedError

logger = structlog.get_logger(__name__)

USERNAME_CLAIM = "username"


class CredentialVerifier(t.Protocol):
    """Protocol for bearer credential verifiers.

    Implementations may use any token scheme as long as a valid credential maps to
    exactly one username.
    """

    def verify(self, credential: str) -> str:
        """Verify the credential and return the username it was issued for.

        Args:
            credential: The opaque bearer string, without the ``Bearer`` prefix.

        Returns:
            The username of the principal.

        Raises:
            InvalidCredentialError: If the credential is malformed, expired or forged.
        """
        ...


class JWTCredentialVerifier:
    """Verifies ninja-jwt access tokens and reads the username claim."""

    def verify(self, credential: str) -> str:
        try:
            token = AccessToken(credential)  # type: ignore[arg-type]
        except TokenError as e:
            raise InvalidCredentialError(str(e)) from e
        username = token.get(USERNAME_CLAIM)
        if not username:
            raise InvalidCredentialError("Token has no username claim.")
        return str(username)


class Owned(t.Protocol):
    owner_id: int


class Capability(enum.Enum):
    EDIT = "edit"
    """Change a questionnaire: update, publish toggle, delete. Owner only."""

    VIEW_RESULTS = "view_results"
    """Read a questionnaire's submissions. Owner or administrator."""

    ADMINISTER = "administer"
    """Use the administration routes. Administrator only."""


def is_admin(principal: SurveyUser) -> bool:
    return bool(principal.is_admin)


def is_owner(principal: SurveyUser, entity: Owned) -> bool:
    return principal.pk is not None and entity.owner_id == principal.pk


class AccessGuard:
    def __init__(self, verifier: CredentialVerifier) -> None:
        """Initialize the guard with the verifier that checks bearer credentials."""
        self.verifier = verifier

    @classmethod
    def from_config(cls, config: CoreConfig | None = None) -> "AccessGuard":
        """Build a guard using the verifier class named in the engine config."""
        config = config or get_core_config()
        verifier_class = import_string(config.credential_verifier)
        return cls(verifier_class())

    def resolve(self, credential: str | None) -> SurveyUser:
        """Resolve a bearer credential to an active principal.

        Raises:
            UnauthenticatedError: If the credential is missing, fails verification, or names
                an unknown or inactive principal.
        """
        if not credential or not credential.strip():
            raise UnauthenticatedError("Missing authorization token.")
        try:
            username = self.verifier.verify(credential.strip())
        except InvalidCredentialError as e:
            logger.info("credential_rejected", reason=str(e))
            raise UnauthenticatedError("Invalid or expired token.") from e
        principal = SurveyUser.objects.filter(username=username, is_active=True).first()
        if principal is None:
            logger.info("credential_unknown_principal", username=username)
            raise UnauthenticatedError("User not found.")
        return principal

    @staticmethod
    def allows(principal: SurveyUser, capability: Capability, entity: Owned | None = None) -> bool:
        """Whether the principal holds the capability, on the entity where one applies."""
        match capability:
            case Capability.ADMINISTER:
                return is_admin(principal)
            case Capability.EDIT:
                return entity is not None and is_owner(principal, entity)
            case Capability.VIEW_RESULTS:
                return entity is not None and (is_owner(principal, entity) or is_admin(principal))
        return False  # pragma: no cover

    @classmethod
    def require(cls, principal: SurveyUser, capability: Capability, entity: Owned | None = None) -> None:
        """Raise ``ForbiddenError`` unless the principal holds the capability."""
        if not cls.allows(principal, capability, entity):
            logger.warning(
                "access_denied",
                principal_id=principal.pk,
                capability=capability.value,
                entity_owner_id=getattr(entity, "owner_id", None),
            )
            raise ForbiddenError(_DENIED_MESSAGES[capability])


_DENIED_MESSAGES = {
    Capability.EDIT: "Only the owner can modify this questionnaire.",
    Capability.VIEW_RESULTS: "Only the owner or an administrator can view these results.",
    Capability.ADMINISTER: "Administrator access required.",
}
