"""Bootstrap the application by migrating and creating the default principals."""

import typing as t

from decouple import config
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Bootstrap the application by migrating and creating the default administrator and test user."

    def handle(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Migrate, then create the default administrator and test principal when missing."""
        call_command("migrate")
        User = get_user_model()

        admin_username = config("DEFAULT_ADMIN_USERNAME", default="admin")
        admin_password = config("DEFAULT_ADMIN_PASSWORD", default="admin123")
        admin_email = config("DEFAULT_ADMIN_EMAIL", default="admin@example.com")
        if User.objects.filter(username=admin_username).exists():
            self.stdout.write(self.style.WARNING(f"Administrator '{admin_username}' already exists."))
        else:
            User.objects.create_superuser(username=admin_username, password=admin_password, email=admin_email)
            self.stdout.write(self.style.SUCCESS(f"Administrator '{admin_username}' created successfully."))
            if admin_password == "admin123":
                self.stdout.write(
                    self.style.WARNING("The default password is being used. Please change it immediately.")
                )

        test_username = config("DEFAULT_TEST_USERNAME", default="test")
        test_password = config("DEFAULT_TEST_PASSWORD", default="test123")
        test_email = config("DEFAULT_TEST_EMAIL", default="test@example.com")
        if User.objects.filter(username=test_username).exists():
            self.stdout.write(self.style.WARNING(f"Test user '{test_username}' already exists."))
        else:
            User.objects.create_user(username=test_username, password=test_password, email=test_email)
            self.stdout.write(self.style.SUCCESS(f"Test user '{test_username}' created successfully."))
