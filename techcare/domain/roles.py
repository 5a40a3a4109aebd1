"""User roles and their external representations."""

from enum import Enum


class Role(str, Enum):
    """User roles in the system.

    The upper-case value is canonical and is what the ``users.role`` column
    stores. The browser layer uses the lower-case form.
    """

    CUSTOMER = "CUSTOMER"
    TECHNICIAN = "TECHNICIAN"
    ADMIN = "ADMIN"

    @classmethod
    def from_external(cls, value: "str | Role | None") -> "Role | None":
        """Parse a role in any case. Unknown or empty values give ``None``."""
        if isinstance(value, Role):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None

    def to_external(self) -> str:
        """Lower-case form used by client code."""
        return self.value.lower()
