from django.conf import settings
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel


class QuestionnaireQuerySet(models.QuerySet["Questionnaire"]):
    def published(self) -> "QuestionnaireQuerySet":
        return self.filter(is_published=True)

    def visible_to(self, requester_id: int | None) -> "QuestionnaireQuerySet":
        """Published questionnaires, plus the requester's own drafts."""
        if requester_id is None:
            return self.published()
        return self.filter(Q(is_published=True) | Q(owner_id=requester_id))


class Questionnaire(TimeStampedModel):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="questionnaires")
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    is_published = models.BooleanField(default=False, db_index=True)

    objects = QuestionnaireQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.title


class Question(TimeStampedModel):
    questionnaire = models.ForeignKey(Questionnaire, on_delete=models.CASCADE, related_name="questions")
    title = models.CharField(max_length=255)
    kind = models.CharField(max_length=50, help_text="Opaque question type, e.g. single, multiple, text, rating.")
    required = models.BooleanField(default=False)
    options = models.TextField(blank=True, default="", help_text="Serialized choice list, stored as given.")
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["questionnaire", "position"]
        constraints = [
            models.UniqueConstraint(fields=["questionnaire", "position"], name="unique_question_position"),
        ]

    def __str__(self) -> str:
        return f"{self.position}. {self.title}"


class Submission(models.Model):
    """Marks that a respondent answered a questionnaire. At most one per pair."""

    questionnaire = models.ForeignKey(Questionnaire, on_delete=models.CASCADE, related_name="submissions")
    respondent = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="submissions")
    submitted_at = models.DateTimeField(db_index=True)
    ip_address = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        ordering = ["-submitted_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["questionnaire", "respondent"], name="unique_submission_per_respondent"),
        ]

    def __str__(self) -> str:
        return f"Submission #{self.pk} to questionnaire {self.questionnaire_id}"


class Answer(models.Model):
    """A respondent's content for one question.

    Answers do not reference their submission; they are matched to it through
    (respondent, question -> questionnaire).
    """

    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="answers")
    respondent = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="answers")
    content = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["question__position", "id"]
        indexes = [
            models.Index(fields=["respondent", "question"], name="ix_answer_respondent_question"),
        ]

    def __str__(self) -> str:
        return f"Answer #{self.pk} to question {self.question_id}"
