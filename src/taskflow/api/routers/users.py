"""Routes exposing the authenticated user's profile."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import CurrentActorDependency, DatabaseSessionDependency
from ...errors import AuthenticationError
from ...schemas import Envelope, UserPublic
from ...services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=Envelope[UserPublic], summary="Return the current user")
async def read_current_user(
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[UserPublic]:
    user = await UserService(session).repository.get(actor.id)
    if user is None:
        raise AuthenticationError("User no longer exists.")
    return Envelope[UserPublic](success=True, data=UserPublic.model_validate(user))
