import typing as t

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base with creation/modification timestamps and validation on every save."""

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Run model validation (including unique constraints) before saving."""
        self.full_clean()
        super().save(*args, **kwargs)
