"""Questionnaire lifecycle: create, edit, publish and delete a questionnaire with its questions.

Every multi-row write runs in a single transaction through ``common.utils.atomic_write``:
the first failure rolls the whole operation back and surfaces as one terminal error.
"""

import typing as t

import structlog
from django.db.models import QuerySet
from django.utils import timezone

from accounts.guard import AccessGuard, Capability
from accounts.models import SurveyUser
from common.conf import CoreConfig, get_core_config
from common.pagination import clamp_page, paginate
from common.utils import atomic_write
from questionnaires import schema
from questionnaires.exceptions import (
    EmptyQuestionSetError,
    QuestionnaireNotFoundError,
    QuestionnairePublishedError,
    UnknownOwnerError,
)
from questionnaires.models import Answer, Question, Questionnaire, Submission

logger = structlog.get_logger(__name__)

QuestionnairePayload = schema.QuestionnaireCreateSchema | schema.QuestionnaireUpdateSchema


class QuestionnaireLifecycle:
    def __init__(self, config: CoreConfig | None = None) -> None:
        """Initialize the lifecycle manager with the engine config."""
        self.config = config or get_core_config()

    # ---- Reads ----

    def get_questionnaire(self, questionnaire_id: int) -> Questionnaire:
        if questionnaire := Questionnaire.objects.filter(pk=questionnaire_id).first():
            return questionnaire
        raise QuestionnaireNotFoundError()

    def get(self, questionnaire_id: int) -> schema.QuestionnaireDetailSchema:
        """A questionnaire with its questions in display order."""
        questionnaire = self.get_questionnaire(questionnaire_id)
        return schema.QuestionnaireDetailSchema(
            questionnaire=schema.QuestionnaireSchema.from_orm(questionnaire),
            questions=[schema.QuestionSchema.from_orm(q) for q in questionnaire.questions.order_by("position")],
        )

    def list_visible(
        self, requester_id: int | None = None, page: t.Any = None, page_size: t.Any = None
    ) -> schema.QuestionnaireListSchema:
        """List questionnaires newest first.

        With a requester, the result is the union of published questionnaires and the
        requester's own ones; anonymous callers only see published ones. Pagination input
        is clamped rather than rejected.
        """
        page_request = clamp_page(page, page_size, self.config)
        queryset: QuerySet[Questionnaire] = (
            Questionnaire.objects.visible_to(requester_id).select_related("owner").order_by("-created_at", "-id")
        )
        items, total = paginate(queryset, page_request)
        return schema.QuestionnaireListSchema(
            total=total,
            page=page_request.page,
            page_size=page_request.page_size,
            questionnaires=[
                schema.QuestionnaireListItemSchema(
                    questionnaire=schema.QuestionnaireSchema.from_orm(q),
                    creator_name=q.owner.username,
                )
                for q in items
            ],
        )

    # ---- Writes ----

    def create(self, owner_id: int | None, payload: schema.QuestionnaireCreateSchema) -> Questionnaire:
        """Create a questionnaire and all its questions in one transaction.

        Questions are stored in input order; position is the input index.

        Raises:
            UnknownOwnerError: If the owner id is not a known principal.
            EmptyQuestionSetError: If no questions are supplied.
            TransactionError: If any row fails to persist; nothing is kept.
        """
        if not owner_id or owner_id <= 0 or not SurveyUser.objects.filter(pk=owner_id).exists():
            raise UnknownOwnerError()
        if not payload.questions:
            raise EmptyQuestionSetError()

        questionnaire = atomic_write(self._create, owner_id, payload)
        logger.info(
            "questionnaire_created",
            questionnaire_id=questionnaire.id,
            owner_id=owner_id,
            question_count=len(payload.questions),
            is_published=questionnaire.is_published,
        )
        return questionnaire

    def update(
        self, questionnaire_id: int, requester: SurveyUser, payload: schema.QuestionnaireUpdateSchema
    ) -> Questionnaire:
        """Edit a draft questionnaire, fully replacing its question set.

        Only the owner may edit; administrators get no override here.

        Raises:
            QuestionnaireNotFoundError: If the questionnaire does not exist.
            ForbiddenError: If the requester is not the owner.
            QuestionnairePublishedError: If the questionnaire is published.
            EmptyQuestionSetError: If no questions are supplied.
            TransactionError: If the store fails; the previous question set stays intact.
        """
        questionnaire = self.get_questionnaire(questionnaire_id)
        AccessGuard.require(requester, Capability.EDIT, questionnaire)
        if questionnaire.is_published:
            raise QuestionnairePublishedError()
        if not payload.questions:
            raise EmptyQuestionSetError()

        questionnaire = atomic_write(self._update, questionnaire_id, payload)
        logger.info(
            "questionnaire_updated",
            questionnaire_id=questionnaire_id,
            requester_id=requester.id,
            question_count=len(payload.questions),
        )
        return questionnaire

    def set_published(
        self, questionnaire_id: int, published: bool, requester: SurveyUser | None = None
    ) -> Questionnaire:
        """Publish or unpublish. Idempotent, allowed in any state, questions untouched."""
        questionnaire = self.get_questionnaire(questionnaire_id)
        if requester is not None:
            AccessGuard.require(requester, Capability.EDIT, questionnaire)
        Questionnaire.objects.filter(pk=questionnaire_id).update(is_published=published, updated_at=timezone.now())
        questionnaire.refresh_from_db()
        logger.info("questionnaire_publication_set", questionnaire_id=questionnaire_id, is_published=published)
        return questionnaire

    def delete(self, questionnaire_id: int, requester: SurveyUser | None = None) -> schema.DeletionSummarySchema:
        """Delete a questionnaire with its questions, their answers and its submissions.

        Raises:
            QuestionnaireNotFoundError: If the questionnaire does not exist.
            ForbiddenError: If a requester is given and is not the owner.
            TransactionError: If any step fails; nothing is deleted.
        """
        questionnaire = self.get_questionnaire(questionnaire_id)
        if requester is not None:
            AccessGuard.require(requester, Capability.EDIT, questionnaire)

        summary = atomic_write(self._delete, questionnaire_id)
        logger.info("questionnaire_deleted", **summary.model_dump())
        return summary

    # ---- Transaction bodies ----

    def _create(self, owner_id: int, payload: schema.QuestionnaireCreateSchema) -> Questionnaire:
        questionnaire = Questionnaire(owner_id=owner_id, is_published=payload.is_published)
        self._apply_scalars(questionnaire, payload)
        questionnaire.save()
        self._write_questions(questionnaire, payload.questions)
        return questionnaire

    def _update(self, questionnaire_id: int, payload: schema.QuestionnaireUpdateSchema) -> Questionnaire:
        # Lock the row and re-check publication so a concurrent publish cannot slip in before commit.
        questionnaire = Questionnaire.objects.select_for_update().filter(pk=questionnaire_id).first()
        if questionnaire is None:
            raise QuestionnaireNotFoundError()
        if questionnaire.is_published:
            raise QuestionnairePublishedError()

        self._apply_scalars(questionnaire, payload)
        questionnaire.save()
        removed, _ = Question.objects.filter(questionnaire=questionnaire).delete()
        self._write_questions(questionnaire, payload.questions)
        logger.debug("questionnaire_questions_replaced", questionnaire_id=questionnaire_id, removed_rows=removed)
        return questionnaire

    def _delete(self, questionnaire_id: int) -> schema.DeletionSummarySchema:
        question_ids = list(Question.objects.filter(questionnaire_id=questionnaire_id).values_list("id", flat=True))

        _, per_model = Question.objects.filter(id__in=question_ids).delete()
        questions = per_model.get(Question._meta.label, 0)
        answers = per_model.get(Answer._meta.label, 0)
        # Answers normally go with their questions; sweep any the cascade did not reach.
        swept, _ = Answer.objects.filter(question_id__in=question_ids).delete()
        submissions, _ = Submission.objects.filter(questionnaire_id=questionnaire_id).delete()
        Questionnaire.objects.filter(pk=questionnaire_id).delete()

        return schema.DeletionSummarySchema(
            questionnaire_id=questionnaire_id,
            questions=questions,
            answers=answers + swept,
            submissions=submissions,
        )

    @staticmethod
    def _apply_scalars(questionnaire: Questionnaire, payload: QuestionnairePayload) -> None:
        questionnaire.title = payload.title
        questionnaire.description = payload.description
        questionnaire.start_time = payload.start_time
        questionnaire.end_time = payload.end_time

    @staticmethod
    def _write_questions(questionnaire: Questionnaire, questions: list[schema.QuestionInputSchema]) -> None:
        for position, question in enumerate(questions):
            Question.objects.create(
                questionnaire=questionnaire,
                title=question.title,
                kind=question.kind,
                required=question.required,
                options=question.options,
                position=position,
            )
