# src/questionnaires/admin.py

import typing as t

from django.contrib import admin
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline

from . import models


class RespondentLinkMixin:
    """Mixin to add a link to the respondent."""

    def respondent_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "respondent", None):
            return None
        url = reverse("admin:accounts_surveyuser_change", args=[obj.respondent.id])
        return format_html('<a href="{}">{}</a>', url, obj.respondent.username)

    respondent_link.short_description = "Respondent"  # type: ignore[attr-defined]


class QuestionInline(TabularInline):  # type: ignore[misc]
    model = models.Question
    extra = 0
    ordering = ["position"]
    fields = ["position", "title", "kind", "required", "options"]


@admin.register(models.Questionnaire)
class QuestionnaireAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["title", "owner", "is_published", "question_count", "submission_count", "created_at"]
    list_filter = ["is_published", "created_at"]
    search_fields = ["title", "owner__username"]
    autocomplete_fields = ["owner"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [QuestionInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Questionnaire]:
        return (
            super()
            .get_queryset(request)
            .select_related("owner")
            .annotate(
                _question_count=Count("questions", distinct=True),
                _submission_count=Count("submissions", distinct=True),
            )
        )

    @admin.display(description="Questions", ordering="_question_count")
    def question_count(self, obj: models.Questionnaire) -> int:
        return getattr(obj, "_question_count", 0)

    @admin.display(description="Submissions", ordering="_submission_count")
    def submission_count(self, obj: models.Questionnaire) -> int:
        return getattr(obj, "_submission_count", 0)


@admin.register(models.Submission)
class SubmissionAdmin(RespondentLinkMixin, ModelAdmin):  # type: ignore[misc]
    list_display = ["id", "questionnaire", "respondent_link", "submitted_at", "ip_address"]
    list_filter = ["submitted_at"]
    search_fields = ["questionnaire__title", "respondent__username", "ip_address"]
    list_select_related = ["questionnaire", "respondent"]
    readonly_fields = ["questionnaire", "respondent", "submitted_at", "ip_address"]


@admin.register(models.Answer)
class AnswerAdmin(RespondentLinkMixin, ModelAdmin):  # type: ignore[misc]
    list_display = ["id", "question", "respondent_link", "created_at"]
    search_fields = ["content", "respondent__username", "question__title"]
    list_select_related = ["question", "respondent"]
    readonly_fields = ["question", "respondent", "content", "created_at"]
