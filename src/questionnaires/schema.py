import datetime
import typing as t

from ninja import ModelSchema, Schema
from pydantic import AliasChoices, Field, model_validator

from accounts.schema import MinimalUserSchema
from common.schema import OneToTwoFiftyFiveString, PageSchema

from .models import Answer, Question, Questionnaire, Submission

QuestionKind = t.Annotated[str, Field(min_length=1, max_length=50)]


# ---- Input ----


class QuestionInputSchema(Schema):
    title: OneToTwoFiftyFiveString
    kind: QuestionKind
    required: bool = False
    options: str = ""
    position: int | None = Field(None, description="Ignored: questions are stored in input order.")


class QuestionnaireWindowMixin(Schema):
    start_time: datetime.datetime | None = None
    end_time: datetime.datetime | None = None

    @model_validator(mode="after")
    def validate_window(self) -> t.Self:
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time.")
        return self


class QuestionnaireCreateSchema(QuestionnaireWindowMixin):
    title: OneToTwoFiftyFiveString
    description: str = ""
    created_by: int | None = Field(None, description="Owner id. Defaults to the authenticated user.")
    is_published: bool = False
    questions: list[QuestionInputSchema] = Field(default_factory=list)


class QuestionnaireUpdateSchema(QuestionnaireWindowMixin):
    id: int
    title: OneToTwoFiftyFiveString
    description: str = ""
    created_by: int | None = None
    is_published: bool | None = Field(None, description="Ignored: use update-status to toggle publication.")
    questions: list[QuestionInputSchema] = Field(default_factory=list)


class PublishStatusSchema(Schema):
    id: int
    is_published: bool


class AnswerInputSchema(Schema):
    question_id: int
    content: str = ""


class SubmissionInputSchema(Schema):
    questionnaire_id: int
    user_id: int | None = Field(None, description="Respondent id. Defaults to the authenticated user.")
    answers: list[AnswerInputSchema] = Field(default_factory=list)


# ---- Output ----


class QuestionSchema(ModelSchema):
    class Meta:
        model = Question
        fields = ["id", "title", "kind", "required", "options", "position", "created_at", "updated_at"]

    questionnaire_id: int


class QuestionnaireSchema(ModelSchema):
    created_by: int = Field(validation_alias=AliasChoices("owner_id", "created_by"))

    class Meta:
        model = Questionnaire
        fields = [
            "id",
            "title",
            "description",
            "start_time",
            "end_time",
            "is_published",
            "created_at",
            "updated_at",
        ]


class QuestionnaireDetailSchema(Schema):
    questionnaire: QuestionnaireSchema
    questions: list[QuestionSchema]


class QuestionnaireListItemSchema(Schema):
    questionnaire: QuestionnaireSchema
    creator_name: str


class QuestionnaireListSchema(PageSchema):
    questionnaires: list[QuestionnaireListItemSchema]


class SubmissionSchema(ModelSchema):
    questionnaire_id: int
    user_id: int = Field(validation_alias=AliasChoices("respondent_id", "user_id"))

    class Meta:
        model = Submission
        fields = ["id", "submitted_at", "ip_address"]


class CheckSubmissionSchema(Schema):
    has_submitted: bool
    submission: SubmissionSchema | None = None


class ResultAnswerSchema(ModelSchema):
    question_id: int

    class Meta:
        model = Answer
        fields = ["id", "content", "created_at"]


class UserInfoSchema(Schema):
    username: str


class SubmissionResultSchema(Schema):
    submission: SubmissionSchema
    answers: list[ResultAnswerSchema]
    user_info: UserInfoSchema


class QuestionnaireResultsSchema(Schema):
    questionnaire: QuestionnaireSchema
    questions: list[QuestionSchema]
    submissions: list[SubmissionResultSchema]
    total_submissions: int


class DeletionSummarySchema(Schema):
    questionnaire_id: int
    questions: int
    answers: int
    submissions: int


# ---- Reports ----


class AdminQuestionnaireItemSchema(Schema):
    questionnaire: QuestionnaireSchema
    creator_name: str
    submission_count: int
    question_count: int


class AdminQuestionnaireListSchema(PageSchema):
    questionnaires: list[AdminQuestionnaireItemSchema]


class SubmissionAnswerSchema(Schema):
    question_id: int
    content: str


class SubmissionDetailSchema(Schema):
    submission: SubmissionSchema
    user: MinimalUserSchema
    answers: list[SubmissionAnswerSchema]


class QuestionnaireSubmissionsSchema(Schema):
    questionnaire: QuestionnaireSchema
    questions: list[QuestionSchema]
    submissions: list[SubmissionDetailSchema]


class UserStatisticsSchema(Schema):
    total_users: int
    admin_users: int
    normal_users: int


class QuestionnaireStatisticsSchema(Schema):
    total_questionnaires: int
    published_questionnaires: int
    unpublished_questionnaires: int
    total_questions: int


class SubmissionStatisticsSchema(Schema):
    total_submissions: int
    total_answers: int
    recent_submissions: int
    average_answers_per_submission: float


class SystemStatisticsSchema(Schema):
    user_statistics: UserStatisticsSchema
    questionnaire_statistics: QuestionnaireStatisticsSchema
    submission_statistics: SubmissionStatisticsSchema


class PublicStatsSchema(Schema):
    user_count: int
    questionnaire_count: int
    submission_count: int
