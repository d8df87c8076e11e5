"""Reset the administrator's password, creating the account if it is missing."""

import typing as t

from decouple import config
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    """Reset (or create) the administrator account."""

    help = "Reset the administrator's password, creating the account if it does not exist."

    def add_arguments(self, parser: t.Any) -> None:
        """Add command arguments."""
        parser.add_argument("--username", type=str, default=None, help="Administrator username")
        parser.add_argument("--password", type=str, default=None, help="New password")

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        username = options["username"] or config("DEFAULT_ADMIN_USERNAME", default="admin")
        password = options["password"] or config("DEFAULT_ADMIN_PASSWORD", default="admin123")

        User = get_user_model()
        user = User.objects.filter(username=username).first()
        if user is None:
            User.objects.create_superuser(username=username, password=password)
            self.stdout.write(self.style.SUCCESS(f"Administrator '{username}' created."))
            return

        user.set_password(password)
        user.is_admin = True
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.save()
        self.stdout.write(self.style.SUCCESS(f"Password for administrator '{username}' reset."))
