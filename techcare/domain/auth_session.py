"""Authentication session lifecycle.

A session starts out ``LOADING`` and resolves exactly once per bootstrap to
either ``AUTHENTICATED`` or ``UNAUTHENTICATED``. Later sign-in and sign-out
events move it between the two resolved states. ``LOADING`` is never treated
as unauthenticated: decisions made before resolution would redirect users who
are in fact signed in.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from techcare.domain.roles import Role

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Identity:
    """An authenticated caller.

    ``role`` may be ``None`` when the stored role is not one we recognise.
    """

    user_id: UUID
    role: Role | None
    email: str | None = None


@dataclass(frozen=True)
class AuthState:
    status: AuthStatus
    identity: Identity | None = None

    @classmethod
    def loading(cls) -> "AuthState":
        return cls(AuthStatus.LOADING)

    @classmethod
    def unauthenticated(cls) -> "AuthState":
        return cls(AuthStatus.UNAUTHENTICATED)

    @classmethod
    def authenticated(cls, user_id: UUID, role: Role | None, email: str | None = None) -> "AuthState":
        return cls(AuthStatus.AUTHENTICATED, Identity(user_id=user_id, role=role, email=email))

    @property
    def is_loading(self) -> bool:
        return self.status is AuthStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED

    @property
    def role(self) -> Role | None:
        return self.identity.role if self.identity else None

    @property
    def user_id(self) -> UUID | None:
        return self.identity.user_id if self.identity else None


Listener = Callable[[AuthState], None]


class AuthSession:
    """Holds the live identity for one session.

    Only the lifecycle methods below mutate the state. Consumers read
    ``state`` and may subscribe to be told about changes.
    """

    def __init__(self) -> None:
        self._state = AuthState.loading()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def identity(self) -> Identity | None:
        return self._state.identity

    @property
    def role(self) -> Role | None:
        return self._state.role

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def resolve(self, identity: Identity | None) -> AuthState:
        """Finish bootstrap with the identity found, or none."""
        if identity is None:
            return self._set(AuthState.unauthenticated())
        return self._set(AuthState(AuthStatus.AUTHENTICATED, identity))

    def sign_in(self, user_id: UUID, role: Role | str | None, email: str | None = None) -> AuthState:
        return self._set(AuthState.authenticated(user_id, Role.from_external(role), email))

    def sign_out(self) -> AuthState:
        return self._set(AuthState.unauthenticated())

    def reload(self) -> AuthState:
        """Drop back to ``LOADING`` while the identity is fetched again."""
        return self._set(AuthState.loading())

    def _set(self, state: AuthState) -> AuthState:
        if state == self._state:
            return state
        logger.debug(f"Auth session {self._state.status.value} -> {state.status.value}")
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state
