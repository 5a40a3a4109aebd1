"""Role-based access decisions and redirects.

This module is the only place that knows which dashboard belongs to which
role. Pages and endpoints pass a role in and get a route out.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from techcare.config import settings
from techcare.core.exceptions import AuthorizationError
from techcare.domain.auth_session import AuthState, Identity
from techcare.domain.booking_status import BookingStatus
from techcare.domain.roles import Role

DEFAULT_HOME_ROUTE = "/dashboard"

HOME_ROUTES: dict[Role, str] = {
    Role.CUSTOMER: "/dashboard",
    Role.TECHNICIAN: "/technician/dashboard",
    Role.ADMIN: "/admin/dashboard",
}

# Technicians wait for admin approval before their first sign-in
PENDING_APPROVAL_ROUTE = "/signup/pending-approval"


class DecisionKind(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    PENDING = "pending"


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    redirect_to: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(DecisionKind.ALLOW)

    @classmethod
    def deny(cls, redirect_to: str) -> "Decision":
        return cls(DecisionKind.DENY, redirect_to)

    @classmethod
    def pending(cls) -> "Decision":
        return cls(DecisionKind.PENDING)

    @property
    def allowed(self) -> bool:
        return self.kind is DecisionKind.ALLOW


def home_route(role: "Role | str | None") -> str:
    """Dashboard for a role. Unknown roles get the default dashboard."""
    parsed = Role.from_external(role)
    if parsed is None:
        return DEFAULT_HOME_ROUTE
    return HOME_ROUTES.get(parsed, DEFAULT_HOME_ROUTE)


def post_signup_route(role: "Role | str | None") -> str:
    if Role.from_external(role) is Role.TECHNICIAN:
        return PENDING_APPROVAL_ROUTE
    return home_route(role)


def evaluate(
    auth_state: AuthState,
    required_roles: "set[Role] | frozenset[Role] | None" = None,
    require_auth: bool = True,
    login_route: str | None = None,
) -> Decision:
    """Decide whether the caller may proceed.

    While the session is loading no decision is made. A role requirement
    implies authentication.
    """
    if auth_state.is_loading:
        return Decision.pending()

    if not auth_state.is_authenticated:
        if require_auth or required_roles:
            return Decision.deny(login_route or settings.login_route)
        return Decision.allow()

    if required_roles and auth_state.role not in required_roles:
        return Decision.deny(home_route(auth_state.role))

    return Decision.allow()


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    require_auth: bool = True
    roles: frozenset[Role] | None = None
    guest_only: bool = False

    def matches(self, path: str) -> bool:
        if self.prefix == "/":
            return path == "/"
        return path == self.prefix or path.startswith(self.prefix + "/")


PUBLIC_RULE = RouteRule("*", require_auth=False)

ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule("/", require_auth=False),
    RouteRule("/login", require_auth=False, guest_only=True),
    RouteRule("/signup", require_auth=False, guest_only=True),
    RouteRule(PENDING_APPROVAL_ROUTE, require_auth=False),
    RouteRule("/dashboard"),
    RouteRule("/dashboard/technician", roles=frozenset({Role.TECHNICIAN})),
    RouteRule("/profile"),
    RouteRule("/technician/dashboard", roles=frozenset({Role.TECHNICIAN})),
    RouteRule("/technician/profile", roles=frozenset({Role.TECHNICIAN})),
    RouteRule("/admin", roles=frozenset({Role.ADMIN})),
    RouteRule("/book"),
)


def rule_for_path(path: str) -> RouteRule:
    """Most specific rule for a page path. Unlisted pages are public."""
    cleaned = path.split("?", 1)[0].strip().strip("/")
    path = f"/{cleaned}" if cleaned else "/"
    matching = [rule for rule in ROUTE_RULES if rule.matches(path)]
    if not matching:
        return PUBLIC_RULE
    return max(matching, key=lambda rule: len(rule.prefix))


def evaluate_path(auth_state: AuthState, path: str) -> Decision:
    """Decision for navigating to a page."""
    rule = rule_for_path(path)
    if rule.guest_only:
        if auth_state.is_loading:
            return Decision.pending()
        if auth_state.is_authenticated:
            return Decision.deny(home_route(auth_state.role))
        return Decision.allow()
    return evaluate(auth_state, rule.roles, require_auth=rule.require_auth)


def landing_redirect(auth_state: AuthState) -> str | None:
    """Where a public landing page should send the caller, if anywhere."""
    if not auth_state.is_authenticated:
        return None
    return home_route(auth_state.role)


def authorize_status_change(
    actor: Identity,
    customer_id: UUID,
    technician_id: UUID | None,
    target: BookingStatus,
) -> None:
    """Raise unless the actor may move a booking to ``target``.

    The assigned technician may set any status. The booking's customer may
    only cancel.
    """
    if technician_id is not None and actor.user_id == technician_id and actor.role is Role.TECHNICIAN:
        return
    if actor.user_id == customer_id and actor.role is Role.CUSTOMER:
        if target is BookingStatus.CANCELLED:
            return
        raise AuthorizationError("Customers can only cancel their bookings")
    raise AuthorizationError("Only the assigned technician can update this booking")


def authorize_participant_read(actor: Identity, customer_id: UUID, technician_id: UUID | None) -> None:
    if actor.role is Role.ADMIN:
        return
    if actor.user_id == customer_id or (technician_id is not None and actor.user_id == technician_id):
        return
    raise AuthorizationError("You don't have permission to access this booking")
