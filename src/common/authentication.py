import typing as t

from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest

from .auth_base import BaseGuardedAuth


class GuardedBearer(BaseGuardedAuth):
    """Bearer authentication for routes that need a resolved principal.

    Usage:
        @route.post("/create", auth=GuardedBearer())
        def create(self, payload): ...
    """


class AdminBearer(BaseGuardedAuth):
    """Bearer authentication for administration routes."""

    def __init__(self, **kwargs: t.Any) -> None:
        """Always require the administrator flag."""
        super().__init__(admin_only=True, **kwargs)


class OptionalBearer(BaseGuardedAuth):
    """Optional bearer authentication.

    - With a valid bearer token: resolves the principal.
    - Without an Authorization header: continues as AnonymousUser.

    A header that is present but invalid is still rejected with 401.
    """

    def __call__(self, request: HttpRequest) -> t.Any | None:
        """Overrides HttpBearer __call__ to provide optional auth."""
        if not request.headers.get(self.header):
            request.user = AnonymousUser()
            return request.user
        return super().__call__(request)
