"""Schema for accounts module."""

import datetime
import typing as t

from ninja import ModelSchema, Schema
from pydantic import AliasChoices, EmailStr, Field, StringConstraints

from common.schema import PageSchema, StrippedString

from .models import SurveyUser

Username = t.Annotated[str, StringConstraints(min_length=1, max_length=50, strip_whitespace=True)]


class SurveyUserSchema(ModelSchema):
    created_at: datetime.datetime = Field(validation_alias=AliasChoices("date_joined", "created_at"))

    class Meta:
        model = SurveyUser
        fields = ["id", "username", "email", "phone", "is_admin", "updated_at"]


class MinimalUserSchema(Schema):
    id: int
    username: str


class RegisterUserSchema(Schema):
    username: Username
    password: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = None
    phone: StrippedString = ""


class LoginSchema(Schema):
    username: Username
    password: str = Field(..., min_length=1, max_length=128)


class TokenPairSchema(Schema):
    access: str
    refresh: str


class LoginResponseSchema(Schema):
    token: TokenPairSchema
    user: SurveyUserSchema


class UserListSchema(PageSchema):
    users: list[SurveyUserSchema]


class UserDetailSchema(Schema):
    user: SurveyUserSchema
    questionnaire_count: int
    submission_count: int


class AdminUserUpdateSchema(Schema):
    id: int
    email: EmailStr | None = None
    phone: StrippedString | None = None
    is_admin: bool | None = None


class UserDeletionSchema(Schema):
    user_id: int
    deleted_questionnaires: int
    deleted_answers: int
    deleted_submissions: int
