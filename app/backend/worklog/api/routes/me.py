"""Current user endpoint."""

from fastapi import APIRouter, Depends

from worklog.core.auth import RequestUserContext, get_current_user_context

router = APIRouter(prefix="/me", tags=["me"])


@router.get("")
def get_me(context: RequestUserContext = Depends(get_current_user_context)) -> dict[str, object]:
    """Return current authenticated user profile and role."""

    return {
        "id": str(context.user_id),
        "username": context.username,
        "email": context.email,
        "role": context.role.value,
    }
