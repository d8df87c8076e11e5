import typing as t

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

from accounts.validators import normalize_phone_number, validate_phone_number


class SurveyUserQueryset(models.QuerySet["SurveyUser"]):
    """Queryset for SurveyUser."""

    def admins(self) -> "SurveyUserQueryset":
        """Principals holding the administrator flag."""
        return self.filter(is_admin=True)


class SurveyUserManager(UserManager["SurveyUser"]):
    def get_queryset(self) -> SurveyUserQueryset:
        """Get queryset for SurveyUser."""
        return SurveyUserQueryset(self.model, using=self._db)

    def admins(self) -> SurveyUserQueryset:
        return self.get_queryset().admins()

    def create_superuser(  # type: ignore[override]
        self, username: str, email: str | None = None, password: str | None = None, **extra_fields: t.Any
    ) -> "SurveyUser":
        """Superusers are always SurveyHub administrators."""
        extra_fields.setdefault("is_admin", True)
        return super().create_superuser(username, email, password, **extra_fields)


class SurveyUser(AbstractUser):
    """A principal: questionnaire owner, respondent, or administrator."""

    email = models.EmailField(unique=True, null=True, blank=True, help_text="Email address")
    phone = models.CharField(
        max_length=20, blank=True, default="", validators=[validate_phone_number], help_text="Phone number"
    )
    is_admin = models.BooleanField(default=False, db_index=True, help_text="SurveyHub administrator")
    updated_at = models.DateTimeField(auto_now=True)

    objects = SurveyUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["-id"]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Normalize contact fields before saving."""
        if self.phone:
            self.phone = normalize_phone_number(self.phone)
        if not self.email:
            self.email = None
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username
