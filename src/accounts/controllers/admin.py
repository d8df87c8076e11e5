"""Administrative user management."""

from ninja_extra import ControllerBase, api_controller, route

from accounts import schema
from accounts.service import account as account_service
from common.authentication import AdminBearer
from common.pagination import clamp_page
from common.schema import Envelope, ErrorEnvelope, ok
from common.throttling import WriteThrottle


@api_controller("/admin", tags=["Admin"], auth=AdminBearer())
class AdminUserController(ControllerBase):
    @route.get("/users", response={200: Envelope[schema.UserListSchema]}, url_name="admin-users")
    def list_users(self, page: str | None = None, page_size: str | None = None) -> dict[str, object]:
        """List all users, newest first. Pagination values out of range fall back to defaults."""
        return ok(account_service.list_users(clamp_page(page, page_size)))

    @route.get(
        "/user/detail",
        response={200: Envelope[schema.UserDetailSchema], 404: ErrorEnvelope},
        url_name="admin-user-detail",
    )
    def user_detail(self, id: int) -> dict[str, object]:
        """Get a user with the number of questionnaires they own and submissions they made."""
        return ok(account_service.get_user_detail(id))

    @route.put(
        "/user/update",
        response={200: Envelope[schema.SurveyUserSchema], 400: ErrorEnvelope, 404: ErrorEnvelope},
        url_name="admin-user-update",
        throttle=WriteThrottle(),
    )
    def update_user(self, payload: schema.AdminUserUpdateSchema) -> dict[str, object]:
        """Update a user's email, phone or administrator flag. Omitted fields are left unchanged."""
        user = account_service.update_user(payload)
        return ok(schema.SurveyUserSchema.from_orm(user), "User updated.")

    @route.delete(
        "/user/delete",
        response={200: Envelope[schema.UserDeletionSchema], 403: ErrorEnvelope, 404: ErrorEnvelope},
        url_name="admin-user-delete",
        throttle=WriteThrottle(),
    )
    def delete_user(self, id: int) -> dict[str, object]:
        """Delete a user with their questionnaires, answers and submissions.

        Administrator accounts cannot be deleted.
        """
        return ok(account_service.delete_user(id), "User deleted.")
