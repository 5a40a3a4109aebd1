"""Navigation access Pydantic schemas."""

from pydantic import BaseModel


class AccessCheckResponse(BaseModel):
    success: bool = True
    path: str
    decision: str  # allow, deny, pending
    redirect_to: str | None = None


class HomeRouteResponse(BaseModel):
    success: bool = True
    role: str | None
    home_route: str
    post_signup_route: str
