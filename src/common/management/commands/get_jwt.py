"""Get JWT tokens for a specific user by username."""

import typing as t

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.service.auth import get_token_pair_for_user


class Command(BaseCommand):
    """Get JWT access and refresh tokens for a specific user."""

    help = "Get JWT access and refresh tokens for a specific user by username."

    def add_arguments(self, parser: t.Any) -> None:
        """Add command arguments."""
        parser.add_argument("username", type=str, help="Username of the user")

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Issue a token pair for the specified user."""
        username = options["username"]

        User = get_user_model()
        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            raise CommandError(f'User "{username}" does not exist')

        tokens = get_token_pair_for_user(user)

        self.stdout.write(self.style.SUCCESS(f"\nJWT Tokens for: {user.username}"))
        self.stdout.write(self.style.SUCCESS(f"User ID: {user.id}"))
        self.stdout.write(self.style.SUCCESS(f"Administrator: {user.is_admin}"))
        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("Access Token:"))
        self.stdout.write(tokens.access)
        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("Refresh Token:"))
        self.stdout.write(tokens.refresh)
        self.stdout.write("")
