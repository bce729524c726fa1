"""Protected ping used by the frontend to check its session."""

from fastapi import APIRouter, Depends

from globetrotter.core.dependencies import USER_OR_ADMIN
from globetrotter.core.session_store import UserContext
from globetrotter.schemas.base import Envelope

router = APIRouter(prefix="/api", tags=["test"])


@router.get("/test", response_model=Envelope[dict])
async def test_access(current_user: UserContext = Depends(USER_OR_ADMIN)):
    return Envelope(
        message="Access granted",
        data={"user_id": current_user.user_id, "roles": current_user.roles},
    )
