"""Submission recording and result reconstruction."""

from collections import defaultdict

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.guard import AccessGuard, Capability
from accounts.models import SurveyUser
from common.conf import CoreConfig, get_core_config
from common.utils import atomic_write
from questionnaires import schema
from questionnaires.exceptions import (
    CrossQuestionnaireSubmissionError,
    DuplicateSubmissionError,
    QuestionnaireNotFoundError,
)
from questionnaires.models import Answer, Question, Questionnaire, Submission

logger = structlog.get_logger(__name__)


class SubmissionRecorder:
    """Records one submission per (questionnaire, respondent) with its answers.

    Answers are accepted as given: they are checked to belong to the questionnaire, but not
    against each question's ``kind`` or ``required`` metadata.
    """

    def __init__(self, config: CoreConfig | None = None) -> None:
        """Initialize the recorder with the engine config."""
        self.config = config or get_core_config()

    def submit(
        self,
        questionnaire_id: int,
        respondent_id: int,
        answers: list[schema.AnswerInputSchema],
        origin_address: str = "",
    ) -> Submission:
        """Record a submission and its answers in one transaction.

        Raises:
            QuestionnaireNotFoundError: If the questionnaire does not exist.
            DuplicateSubmissionError: If the respondent already submitted it.
            CrossQuestionnaireSubmissionError: If an answer targets a question of another
                questionnaire.
            TransactionError: If the store fails; nothing is kept.
        """
        if not Questionnaire.objects.filter(pk=questionnaire_id).exists():
            raise QuestionnaireNotFoundError()

        submission = atomic_write(self._submit, questionnaire_id, respondent_id, answers, origin_address)
        logger.info(
            "submission_recorded",
            questionnaire_id=questionnaire_id,
            respondent_id=respondent_id,
            submission_id=submission.id,
            answer_count=len(answers),
        )
        return submission

    def has_submitted(self, questionnaire_id: int, respondent_id: int) -> tuple[bool, Submission | None]:
        submission = Submission.objects.filter(questionnaire_id=questionnaire_id, respondent_id=respondent_id).first()
        return submission is not None, submission

    def results(self, questionnaire_id: int, requester: SurveyUser | None = None) -> schema.QuestionnaireResultsSchema:
        """Every submission of a questionnaire with the respondent's answers to it.

        Answers carry no submission reference, so they are matched per submission by
        respondent and by question belonging to this questionnaire.

        Raises:
            QuestionnaireNotFoundError: If the questionnaire does not exist.
            ForbiddenError: If a requester is given and is neither owner nor administrator.
        """
        questionnaire = Questionnaire.objects.filter(pk=questionnaire_id).first()
        if questionnaire is None:
            raise QuestionnaireNotFoundError()
        if requester is not None:
            AccessGuard.require(requester, Capability.VIEW_RESULTS, questionnaire)

        questions = list(Question.objects.filter(questionnaire=questionnaire).order_by("position"))
        submissions = list(
            Submission.objects.filter(questionnaire=questionnaire)
            .select_related("respondent")
            .order_by("-submitted_at", "-id")
        )
        answers_by_respondent: dict[int, list[Answer]] = defaultdict(list)
        answers = Answer.objects.filter(
            question__questionnaire=questionnaire,
            respondent_id__in=[s.respondent_id for s in submissions],
        ).order_by("question__position", "id")
        for answer in answers:
            answers_by_respondent[answer.respondent_id].append(answer)

        return schema.QuestionnaireResultsSchema(
            questionnaire=schema.QuestionnaireSchema.from_orm(questionnaire),
            questions=[schema.QuestionSchema.from_orm(q) for q in questions],
            submissions=[
                schema.SubmissionResultSchema(
                    submission=schema.SubmissionSchema.from_orm(s),
                    answers=[schema.ResultAnswerSchema.from_orm(a) for a in answers_by_respondent[s.respondent_id]],
                    user_info=schema.UserInfoSchema(username=s.respondent.username),
                )
                for s in submissions
            ],
            total_submissions=len(submissions),
        )

    def _submit(
        self,
        questionnaire_id: int,
        respondent_id: int,
        answers: list[schema.AnswerInputSchema],
        origin_address: str,
    ) -> Submission:
        if Submission.objects.filter(questionnaire_id=questionnaire_id, respondent_id=respondent_id).exists():
            raise DuplicateSubmissionError()

        question_ids = set(Question.objects.filter(questionnaire_id=questionnaire_id).values_list("id", flat=True))
        if foreign := {a.question_id for a in answers} - question_ids:
            logger.warning(
                "submission_foreign_questions",
                questionnaire_id=questionnaire_id,
                question_ids=sorted(foreign),
            )
            raise CrossQuestionnaireSubmissionError()

        now = timezone.now()
        try:
            # The unique constraint is the authoritative duplicate check: a concurrent
            # submission may pass the read above before either commits.
            with transaction.atomic():
                submission = Submission.objects.create(
                    questionnaire_id=questionnaire_id,
                    respondent_id=respondent_id,
                    submitted_at=now,
                    ip_address=origin_address[:50],
                )
        except IntegrityError:
            if Submission.objects.filter(questionnaire_id=questionnaire_id, respondent_id=respondent_id).exists():
                logger.info("submission_race_lost", questionnaire_id=questionnaire_id, respondent_id=respondent_id)
                raise DuplicateSubmissionError() from None
            raise

        Answer.objects.bulk_create(
            [
                Answer(question_id=a.question_id, respondent_id=respondent_id, content=a.content, created_at=now)
                for a in answers
            ]
        )
        return submission
