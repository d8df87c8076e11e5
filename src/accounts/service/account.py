"""Principal directory: registration and administrative user management."""

import structlog
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from accounts import schema
from accounts.exceptions import AdminDeletionError, EmailTakenError, UserNotFoundError, UsernameTakenError
from accounts.models import SurveyUser
from common.exceptions import ValidationFailedError
from common.pagination import PageRequest, paginate
from common.utils import atomic_write
from questionnaires.models import Answer, Questionnaire, Submission
from questionnaires.service.lifecycle import QuestionnaireLifecycle

logger = structlog.get_logger(__name__)


def _check_email_available(email: str | None, *, exclude_pk: int | None = None) -> None:
    if not email:
        return
    qs: QuerySet[SurveyUser] = SurveyUser.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise EmailTakenError()


def register_user(payload: schema.RegisterUserSchema) -> SurveyUser:
    """Register a new principal.

    Args:
        payload: The registration data.

    Returns:
        The newly created user.

    Raises:
        UsernameTakenError: If the username is already registered.
        EmailTakenError: If the email is already in use.
        ValidationFailedError: If the password is rejected by the password validators.
    """
    logger.info("user_registration_started", username=payload.username)
    if SurveyUser.objects.filter(username=payload.username).exists():
        logger.warning("user_registration_duplicate", username=payload.username)
        raise UsernameTakenError()
    _check_email_available(payload.email)
    try:
        validate_password(payload.password)
    except ValidationError as e:
        raise ValidationFailedError(" ".join(e.messages)) from e

    user = SurveyUser.objects.create_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
    )
    logger.info("user_registration_completed", user_id=user.id)
    return user


def get_user(user_id: int) -> SurveyUser:
    if user := SurveyUser.objects.filter(pk=user_id).first():
        return user
    raise UserNotFoundError()


def list_users(page_request: PageRequest) -> schema.UserListSchema:
    """List principals, newest first."""
    users, total = paginate(SurveyUser.objects.order_by("-id"), page_request)
    return schema.UserListSchema(
        total=total,
        page=page_request.page,
        page_size=page_request.page_size,
        users=[schema.SurveyUserSchema.from_orm(u) for u in users],
    )


def get_user_detail(user_id: int) -> schema.UserDetailSchema:
    """A principal with the number of questionnaires they own and submissions they made."""
    user = get_user(user_id)
    return schema.UserDetailSchema(
        user=schema.SurveyUserSchema.from_orm(user),
        questionnaire_count=Questionnaire.objects.filter(owner=user).count(),
        submission_count=Submission.objects.filter(respondent=user).count(),
    )


def update_user(payload: schema.AdminUserUpdateSchema) -> SurveyUser:
    """Update a principal's contact data and administrator flag.

    Only fields present in the payload are changed.
    """
    user = get_user(payload.id)
    changes = payload.model_dump(exclude={"id"}, exclude_none=True)
    if "email" in changes:
        _check_email_available(changes["email"], exclude_pk=user.pk)
    for key, value in changes.items():
        setattr(user, key, value)
    user.full_clean(exclude=["password"])
    user.save()
    logger.info("user_updated", user_id=user.id, fields=sorted(changes))
    return user


def delete_user(user_id: int, lifecycle: QuestionnaireLifecycle | None = None) -> schema.UserDeletionSchema:
    """Delete a principal together with everything they own or submitted.

    Owned questionnaires are removed through the lifecycle cascade, so their questions,
    answers and submissions by other respondents go too. Then the user's own remaining
    answers and submissions are removed, then the user. All in one transaction.

    Raises:
        UserNotFoundError: If the user does not exist.
        AdminDeletionError: If the user is an administrator.
        TransactionError: If the store fails; nothing is deleted.
    """
    user = get_user(user_id)
    if user.is_admin:
        logger.warning("admin_deletion_blocked", user_id=user.id)
        raise AdminDeletionError()
    return atomic_write(_delete_user_rows, user, lifecycle or QuestionnaireLifecycle())


def _delete_user_rows(user: SurveyUser, lifecycle: QuestionnaireLifecycle) -> schema.UserDeletionSchema:
    counts: dict[str, int] = {"questionnaires": 0, "answers": 0, "submissions": 0}
    for questionnaire_id in list(Questionnaire.objects.filter(owner=user).values_list("id", flat=True)):
        summary = lifecycle.delete(questionnaire_id)
        counts["questionnaires"] += 1
        counts["answers"] += summary.answers
        counts["submissions"] += summary.submissions

    answers, _ = Answer.objects.filter(respondent=user).delete()
    submissions, _ = Submission.objects.filter(respondent=user).delete()
    counts["answers"] += answers
    counts["submissions"] += submissions

    user_id = user.id
    user.delete()
    logger.info("user_deleted", user_id=user_id, **counts)
    return schema.UserDeletionSchema(
        user_id=user_id,
        deleted_questionnaires=counts["questionnaires"],
        deleted_answers=counts["answers"],
        deleted_submissions=counts["submissions"],
    )
