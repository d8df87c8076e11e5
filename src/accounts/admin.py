"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from accounts.models import SurveyUser


@admin.register(SurveyUser)
class SurveyUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for SurveyHub principals."""

    list_display = [
        "username",
        "email",
        "phone",
        "is_admin",
        "is_active",
        "date_joined",
        "questionnaire_count",
        "submission_count",
    ]
    list_filter = ["is_admin", "is_staff", "is_active", "date_joined"]
    search_fields = ["username", "email", "phone"]
    ordering = ["-date_joined"]
    readonly_fields = ["id", "date_joined", "last_login", "updated_at"]

    fieldsets = (
        ("Account", {"fields": ("id", ("username", "email"), "phone", "password")}),
        ("Roles", {"fields": (("is_admin", "is_active"), ("is_staff", "is_superuser"))}),
        ("Dates", {"fields": (("date_joined", "last_login"), "updated_at"), "classes": ["collapse"]}),
    )

    def get_queryset(self, request: HttpRequest) -> QuerySet[SurveyUser]:
        return (
            super()
            .get_queryset(request)
            .annotate(
                _questionnaire_count=Count("questionnaires", distinct=True),
                _submission_count=Count("submissions", distinct=True),
            )
        )

    @admin.display(description="Questionnaires", ordering="_questionnaire_count")
    def questionnaire_count(self, obj: SurveyUser) -> int:
        return getattr(obj, "_questionnaire_count", 0)

    @admin.display(description="Submissions", ordering="_submission_count")
    def submission_count(self, obj: SurveyUser) -> int:
        return getattr(obj, "_submission_count", 0)
