from fastapi import APIRouter

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, is_admin_user
from plumbprep.models import User
from plumbprep.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _user_details(user: User) -> schemas.UserDetailsResponse:
    details = schemas.UserDetailsResponse.model_validate(user)
    details.is_admin = is_admin_user(user)
    return details


@router.get("/me")
async def get_me(current_user: CurrentUser) -> schemas.UserDetailsResponse:
    """Get the current user's profile and subscription information."""
    return _user_details(current_user)


@router.post("/me")
async def update_me(
    current_user: CurrentUser,
    db: DatabaseSession,
    update_data: schemas.UserUpdateRequest,
) -> schemas.UserDetailsResponse:
    """
    Update the current user's profile.

    - To change name or phone: provide the fields to change
    - To change password: provide both `current_password` and `new_password` fields
    """
    user = UserService(db).update_user(current_user, update_data)
    return _user_details(user)
