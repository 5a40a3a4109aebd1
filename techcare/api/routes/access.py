"""Navigation access endpoints used by the web client's route guards."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from techcare.api.deps import CurrentIdentity, get_auth_session
from techcare.domain.access_policy import evaluate_path, home_route, post_signup_route
from techcare.domain.auth_session import AuthSession
from techcare.schemas.access import AccessCheckResponse, HomeRouteResponse

router = APIRouter()


@router.get("/check", response_model=AccessCheckResponse)
async def check_access(
    session: Annotated[AuthSession, Depends(get_auth_session)],
    path: str = Query(..., min_length=1, max_length=500),
) -> AccessCheckResponse:
    """Decide whether the caller may open a page, and where to go if not."""
    decision = evaluate_path(session.state, path)
    return AccessCheckResponse(
        path=path,
        decision=decision.kind.value,
        redirect_to=decision.redirect_to,
    )


@router.get("/home", response_model=HomeRouteResponse)
async def get_home_route(current_user: CurrentIdentity) -> HomeRouteResponse:
    """Dashboard and post-signup destinations for the caller's role."""
    return HomeRouteResponse(
        role=current_user.role.value if current_user.role else None,
        home_route=home_route(current_user.role),
        post_signup_route=post_signup_route(current_user.role),
    )
