"""Read-only report compositions for dashboards and the admin area.

Counts are best-effort: a failed count query is logged and reported as zero so the
rest of the report stays available.
"""

import typing as t
from collections import defaultdict
from datetime import timedelta

import structlog
from django.db import DatabaseError, transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from accounts.models import SurveyUser
from accounts.schema import MinimalUserSchema
from common.conf import CoreConfig, get_core_config
from common.pagination import clamp_page, paginate
from questionnaires import schema
from questionnaires.exceptions import QuestionnaireNotFoundError
from questionnaires.models import Answer, Question, Questionnaire, Submission

logger = structlog.get_logger(__name__)


def safe_count(statistic: str, queryset: QuerySet[t.Any]) -> int:
    """Count rows, reporting 0 when the store fails."""
    try:
        with transaction.atomic():
            return queryset.count()
    except DatabaseError:
        logger.warning("statistic_count_failed", statistic=statistic, exc_info=True)
        return 0


def answers_per_submission(total_answers: int, total_submissions: int) -> float:
    if total_submissions <= 0:
        return 0.0
    return round(total_answers / total_submissions, 2)


class ReportAggregator:
    def __init__(self, config: CoreConfig | None = None) -> None:
        """Initialize the aggregator with the engine config."""
        self.config = config or get_core_config()

    def list_questionnaires(self, page: t.Any = None, page_size: t.Any = None) -> schema.AdminQuestionnaireListSchema:
        """All questionnaires, newest first, with owner name and submission/question counts."""
        page_request = clamp_page(page, page_size, self.config)
        queryset = (
            Questionnaire.objects.select_related("owner")
            .annotate(
                submission_count=Count("submissions", distinct=True),
                question_count=Count("questions", distinct=True),
            )
            .order_by("-id")
        )
        items, total = paginate(queryset, page_request)
        return schema.AdminQuestionnaireListSchema(
            total=total,
            page=page_request.page,
            page_size=page_request.page_size,
            questionnaires=[
                schema.AdminQuestionnaireItemSchema(
                    questionnaire=schema.QuestionnaireSchema.from_orm(q),
                    creator_name=q.owner.username,
                    submission_count=q.submission_count,  # type: ignore[attr-defined]
                    question_count=q.question_count,  # type: ignore[attr-defined]
                )
                for q in items
            ],
        )

    def submission_details(self, questionnaire_id: int) -> schema.QuestionnaireSubmissionsSchema:
        """A questionnaire's submissions, newest first, each with respondent and answers."""
        questionnaire = Questionnaire.objects.filter(pk=questionnaire_id).first()
        if questionnaire is None:
            raise QuestionnaireNotFoundError()

        questions = list(Question.objects.filter(questionnaire=questionnaire).order_by("position"))
        submissions = list(
            Submission.objects.filter(questionnaire=questionnaire)
            .select_related("respondent")
            .order_by("-submitted_at", "-id")
        )
        answers: dict[int, list[schema.SubmissionAnswerSchema]] = defaultdict(list)
        for question_id, respondent_id, content in (
            Answer.objects.filter(
                question__questionnaire=questionnaire,
                respondent_id__in=[s.respondent_id for s in submissions],
            )
            .order_by("question__position", "id")
            .values_list("question_id", "respondent_id", "content")
        ):
            answers[respondent_id].append(schema.SubmissionAnswerSchema(question_id=question_id, content=content))

        return schema.QuestionnaireSubmissionsSchema(
            questionnaire=schema.QuestionnaireSchema.from_orm(questionnaire),
            questions=[schema.QuestionSchema.from_orm(q) for q in questions],
            submissions=[
                schema.SubmissionDetailSchema(
                    submission=schema.SubmissionSchema.from_orm(s),
                    user=MinimalUserSchema(id=s.respondent_id, username=s.respondent.username),
                    answers=answers[s.respondent_id],
                )
                for s in submissions
            ],
        )

    def system_statistics(self) -> schema.SystemStatisticsSchema:
        total_users = safe_count("total_users", SurveyUser.objects.all())
        admin_users = safe_count("admin_users", SurveyUser.objects.admins())
        total_questionnaires = safe_count("total_questionnaires", Questionnaire.objects.all())
        published = safe_count("published_questionnaires", Questionnaire.objects.published())
        total_questions = safe_count("total_questions", Question.objects.all())
        total_submissions = safe_count("total_submissions", Submission.objects.all())
        total_answers = safe_count("total_answers", Answer.objects.all())
        window_start = timezone.now() - timedelta(days=self.config.recent_submissions_days)
        recent_submissions = safe_count("recent_submissions", Submission.objects.filter(submitted_at__gt=window_start))

        return schema.SystemStatisticsSchema(
            user_statistics=schema.UserStatisticsSchema(
                total_users=total_users,
                admin_users=admin_users,
                normal_users=max(total_users - admin_users, 0),
            ),
            questionnaire_statistics=schema.QuestionnaireStatisticsSchema(
                total_questionnaires=total_questionnaires,
                published_questionnaires=published,
                unpublished_questionnaires=max(total_questionnaires - published, 0),
                total_questions=total_questions,
            ),
            submission_statistics=schema.SubmissionStatisticsSchema(
                total_submissions=total_submissions,
                total_answers=total_answers,
                recent_submissions=recent_submissions,
                average_answers_per_submission=answers_per_submission(total_answers, total_submissions),
            ),
        )

    def public_stats(self) -> schema.PublicStatsSchema:
        return schema.PublicStatsSchema(
            user_count=safe_count("user_count", SurveyUser.objects.all()),
            questionnaire_count=safe_count("questionnaire_count", Questionnaire.objects.all()),
            submission_count=safe_count("submission_count", Submission.objects.all()),
        )
