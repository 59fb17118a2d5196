"""Current-user route."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.auth import get_current_user
from app.schemas.auth import CurrentUser, UserView

router = APIRouter()


@router.get("/me", response_model=UserView, response_model_exclude_none=True)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserView:
    """Return the identity carried by the bearer token."""
    return UserView(
        id=current_user.id,
        name=current_user.name,
        email=current_user.email,
        roles=current_user.roles,
    )
