"""API dependencies for authentication and data access."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from techcare.core.exceptions import AuthenticationError
from techcare.core.security import role_claim, verify_token
from techcare.database import get_db
from techcare.domain.access_policy import evaluate
from techcare.domain.auth_session import AuthSession, Identity
from techcare.domain.roles import Role
from techcare.services.booking_store import BookingStore
from techcare.services.technician_store import TechnicianStore

logger = logging.getLogger(__name__)

# Security scheme; missing credentials resolve to an unauthenticated session
security = HTTPBearer(auto_error=False)


def get_booking_store(db: Annotated[AsyncSession, Depends(get_db)]) -> BookingStore:
    return BookingStore(db)


def get_technician_store(db: Annotated[AsyncSession, Depends(get_db)]) -> TechnicianStore:
    return TechnicianStore(db)


async def get_auth_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    technicians: Annotated[TechnicianStore, Depends(get_technician_store)],
) -> AuthSession:
    """Bootstrap the caller's session from the bearer token.

    The role comes from the token claims when the auth service put it there,
    otherwise from the profile row.
    """
    session = AuthSession()
    if not credentials:
        session.resolve(None)
        return session

    try:
        payload = verify_token(credentials.credentials)
        user_id = UUID(str(payload["sub"]))
    except (AuthenticationError, ValueError) as e:
        logger.info(f"Rejected access token: {e}")
        session.resolve(None)
        return session

    role = Role.from_external(role_claim(payload))
    if role is None:
        role = Role.from_external(await technicians.get_user_role(user_id))

    session.resolve(Identity(user_id=user_id, role=role, email=payload.get("email")))
    return session


async def get_current_identity(
    session: Annotated[AuthSession, Depends(get_auth_session)],
) -> Identity:
    """Get the authenticated caller or fail with 401."""
    decision = evaluate(session.state)
    if not decision.allowed or session.identity is None:
        raise AuthenticationError()
    return session.identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
Bookings = Annotated[BookingStore, Depends(get_booking_store)]
Technicians = Annotated[TechnicianStore, Depends(get_technician_store)]
