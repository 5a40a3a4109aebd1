"""Role-based access control dependencies."""

from collections.abc import Callable
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends

from techcare.api.deps import get_auth_session
from techcare.core.exceptions import AuthenticationError, AuthorizationError
from techcare.domain.access_policy import DecisionKind, evaluate
from techcare.domain.auth_session import AuthSession, Identity
from techcare.domain.roles import Role


def require_role(*allowed_roles: Role) -> Callable[..., Any]:
    """Dependency to require specific roles."""
    roles = frozenset(allowed_roles)

    async def role_checker(
        session: Annotated[AuthSession, Depends(get_auth_session)],
    ) -> Identity:
        decision = evaluate(session.state, roles)
        if decision.kind is DecisionKind.ALLOW and session.identity is not None:
            return session.identity
        if not session.is_authenticated:
            raise AuthenticationError()
        role = session.role.value if session.role else "unknown"
        raise AuthorizationError(f"Role '{role}' is not authorized for this action")

    return role_checker


def assert_self_or_admin(actor: Identity, user_id: UUID, resource: str) -> None:
    """Allow a user to act on their own records, or an admin on anyone's."""
    if actor.role is Role.ADMIN or actor.user_id == user_id:
        return
    raise AuthorizationError(f"You can only access your own {resource}")


# Convenience dependencies
require_admin = require_role(Role.ADMIN)
require_customer = require_role(Role.CUSTOMER)
