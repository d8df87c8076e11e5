import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase, api_controller, route

from accounts.models import SurveyUser
from common.authentication import AdminBearer, GuardedBearer, OptionalBearer
from common.exceptions import ForbiddenError
from common.schema import Envelope, ErrorEnvelope, ok
from common.throttling import QuestionnaireSubmissionThrottle, WriteThrottle
from common.utils import get_client_ip
from questionnaires import schema
from questionnaires.service import QuestionnaireLifecycle, ReportAggregator, SubmissionRecorder

lifecycle = QuestionnaireLifecycle()
recorder = SubmissionRecorder()
reports = ReportAggregator()


@api_controller("/questionnaire", tags=["Questionnaire"])
class QuestionnaireController(ControllerBase):
    def principal(self) -> SurveyUser:
        """Get the authenticated user for this request."""
        return t.cast(SurveyUser, self.context.request.user)  # type: ignore[union-attr]

    @route.post(
        "/create",
        response={201: Envelope[schema.QuestionnaireDetailSchema], 400: ErrorEnvelope, 403: ErrorEnvelope},
        url_name="questionnaire-create",
        auth=GuardedBearer(),
        throttle=WriteThrottle(),
    )
    def create(self, payload: schema.QuestionnaireCreateSchema) -> tuple[int, dict[str, t.Any]]:
        """Create a questionnaire with its questions.

        Questions are stored in the order given. `created_by` defaults to the caller and may
        not name anyone else.
        """
        user = self.principal()
        owner_id = payload.created_by if payload.created_by is not None else user.id
        if owner_id != user.id:
            raise ForbiddenError("You can only create questionnaires for yourself.")
        questionnaire = lifecycle.create(owner_id, payload)
        return 201, ok(lifecycle.get(questionnaire.id), "Questionnaire created.")

    @route.get(
        "/list",
        response={200: Envelope[schema.QuestionnaireListSchema]},
        url_name="questionnaire-list",
        auth=OptionalBearer(),
    )
    def list_questionnaires(self, page: str | None = None, page_size: str | None = None) -> dict[str, t.Any]:
        """List published questionnaires plus, for a logged-in caller, their own drafts.

        Newest first. Out-of-range pagination values fall back to page 1 and page size 10.
        """
        user = self.context.request.user  # type: ignore[union-attr]
        requester_id = None if isinstance(user, AnonymousUser) else user.pk
        return ok(lifecycle.list_visible(requester_id, page, page_size))

    @route.get(
        "/detail",
        response={200: Envelope[schema.QuestionnaireDetailSchema], 404: ErrorEnvelope},
        url_name="questionnaire-detail",
    )
    def detail(self, id: int) -> dict[str, t.Any]:
        """Get a questionnaire with its questions in display order."""
        return ok(lifecycle.get(id))

    @route.put(
        "/update",
        response={
            200: Envelope[schema.QuestionnaireDetailSchema],
            400: ErrorEnvelope,
            403: ErrorEnvelope,
            404: ErrorEnvelope,
        },
        url_name="questionnaire-update",
        auth=GuardedBearer(),
        throttle=WriteThrottle(),
    )
    def update(self, payload: schema.QuestionnaireUpdateSchema) -> dict[str, t.Any]:
        """Edit a draft questionnaire owned by the caller.

        The question list replaces the existing one entirely. Published questionnaires must be
        unpublished first.
        """
        questionnaire = lifecycle.update(payload.id, self.principal(), payload)
        return ok(lifecycle.get(questionnaire.id), "Questionnaire updated.")

    @route.put(
        "/update-status",
        response={200: Envelope[schema.QuestionnaireSchema], 403: ErrorEnvelope, 404: ErrorEnvelope},
        url_name="questionnaire-update-status",
        auth=GuardedBearer(),
        throttle=WriteThrottle(),
    )
    def update_status(self, payload: schema.PublishStatusSchema) -> dict[str, t.Any]:
        """Publish or unpublish a questionnaire owned by the caller."""
        questionnaire = lifecycle.set_published(payload.id, payload.is_published, requester=self.principal())
        message = "Questionnaire published." if questionnaire.is_published else "Questionnaire unpublished."
        return ok(schema.QuestionnaireSchema.from_orm(questionnaire), message)

    @route.delete(
        "/delete",
        response={200: Envelope[schema.DeletionSummarySchema], 403: ErrorEnvelope, 404: ErrorEnvelope},
        url_name="questionnaire-delete",
        auth=GuardedBearer(),
        throttle=WriteThrottle(),
    )
    def delete(self, id: int) -> dict[str, t.Any]:
        """Delete a questionnaire owned by the caller, with all its questions, answers and submissions."""
        return ok(lifecycle.delete(id, requester=self.principal()), "Questionnaire deleted.")

    @route.post(
        "/submit",
        response={
            201: Envelope[schema.SubmissionSchema],
            400: ErrorEnvelope,
            403: ErrorEnvelope,
            404: ErrorEnvelope,
            409: ErrorEnvelope,
        },
        url_name="questionnaire-submit",
        auth=GuardedBearer(),
        throttle=QuestionnaireSubmissionThrottle(),
    )
    def submit(self, payload: schema.SubmissionInputSchema) -> tuple[int, dict[str, t.Any]]:
        """Submit answers to a questionnaire. Each user can submit a questionnaire once."""
        user = self.principal()
        if payload.user_id is not None and payload.user_id != user.id:
            raise ForbiddenError("You can only submit answers as yourself.")
        submission = recorder.submit(
            payload.questionnaire_id,
            user.id,
            payload.answers,
            origin_address=get_client_ip(self.context.request),  # type: ignore[arg-type]
        )
        return 201, ok(schema.SubmissionSchema.from_orm(submission), "Submission recorded.")

    @route.get(
        "/check-submission",
        response={200: Envelope[schema.CheckSubmissionSchema]},
        url_name="questionnaire-check-submission",
        auth=GuardedBearer(),
    )
    def check_submission(self, questionnaire_id: int) -> dict[str, t.Any]:
        """Tell whether the caller has already submitted the questionnaire."""
        has_submitted, submission = recorder.has_submitted(questionnaire_id, self.principal().id)
        return ok(
            schema.CheckSubmissionSchema(
                has_submitted=has_submitted,
                submission=schema.SubmissionSchema.from_orm(submission) if submission else None,
            )
        )

    @route.get(
        "/results",
        response={200: Envelope[schema.QuestionnaireResultsSchema], 403: ErrorEnvelope, 404: ErrorEnvelope},
        url_name="questionnaire-results",
        auth=GuardedBearer(),
    )
    def results(self, id: int) -> dict[str, t.Any]:
        """Get every submission of a questionnaire with its answers. Owner or administrator only."""
        return ok(recorder.results(id, requester=self.principal()))

    @route.get("/stats", response={200: Envelope[schema.PublicStatsSchema]}, url_name="questionnaire-stats")
    def stats(self) -> dict[str, t.Any]:
        """Public counts of users, questionnaires and submissions."""
        return ok(reports.public_stats())


@api_controller("/admin", tags=["Admin"], auth=AdminBearer())
class QuestionnaireAdminController(ControllerBase):
    @route.get(
        "/questionnaires",
        response={200: Envelope[schema.AdminQuestionnaireListSchema]},
        url_name="admin-questionnaires",
    )
    def list_questionnaires(self, page: str | None = None, page_size: str | None = None) -> dict[str, t.Any]:
        """List all questionnaires with owner name, submission count and question count."""
        return ok(reports.list_questionnaires(page, page_size))

    @route.get(
        "/questionnaire/submissions",
        response={200: Envelope[schema.QuestionnaireSubmissionsSchema], 404: ErrorEnvelope},
        url_name="admin-questionnaire-submissions",
    )
    def submissions(self, id: int) -> dict[str, t.Any]:
        """Get a questionnaire's submissions with respondent and answers."""
        return ok(reports.submission_details(id))

    @route.get("/statistics", response={200: Envelope[schema.SystemStatisticsSchema]}, url_name="admin-statistics")
    def statistics(self) -> dict[str, t.Any]:
        """System-wide user, questionnaire and submission statistics."""
        return ok(reports.system_statistics())
