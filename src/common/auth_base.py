"""Base authentication classes for the SurveyHub API."""

from django.http import HttpRequest
from ninja.security import HttpBearer

from accounts.guard import AccessGuard, Capability
from accounts.models import SurveyUser
from common.exceptions import UnauthenticatedError


class BaseGuardedAuth(HttpBearer):
    """Bearer authentication that delegates credential resolution to the Access Guard.

    Subclasses may require extra principal properties, such as the administrator flag.
    """

    def __init__(self, *, guard: AccessGuard | None = None, admin_only: bool = False) -> None:
        """Initialize the auth class.

        Args:
            guard: The guard to resolve credentials with. Built from the engine config
                on first use when omitted.
            admin_only: Whether the principal must be an administrator.
        """
        self._guard = guard
        self.admin_only = admin_only
        super().__init__()

    @property
    def guard(self) -> AccessGuard:
        if self._guard is None:
            self._guard = AccessGuard.from_config()
        return self._guard

    def authenticate(self, request: HttpRequest, token: str) -> SurveyUser | None:
        """Resolve the bearer token and check principal requirements.

        Returns:
            The principal, or None when the credential is rejected (answered with 401).

        Raises:
            ForbiddenError: If the principal lacks a required privilege.
        """
        try:
            principal = self.guard.resolve(token)
        except UnauthenticatedError:
            return None

        if self.admin_only:
            AccessGuard.require(principal, Capability.ADMINISTER)

        request.user = principal
        return principal
