"""Technician approval workflow.

New technicians start ``PENDING``. An admin either approves or rejects them;
an approved technician is never rejected (their account is deactivated
instead) and neither decision is repeated.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from techcare.core.exceptions import AuthorizationError, ValidationError
from techcare.domain.auth_session import Identity
from techcare.domain.roles import Role


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ApprovalChange:
    technician_user_id: UUID
    previous_status: ApprovalStatus
    approval_status: ApprovalStatus
    updated_at: datetime


def _assert_admin(actor: Identity) -> None:
    if actor.role is not Role.ADMIN:
        raise AuthorizationError("Only admins can review technicians")


def approve(
    technician_user_id: UUID,
    current_status: "str | None",
    is_active: bool,
    actor: Identity,
    now: datetime | None = None,
) -> ApprovalChange:
    """Approve a technician.

    ``current_status`` is ``None`` when the technician has no profile row yet.
    """
    _assert_admin(actor)
    if not is_active:
        raise ValidationError("Cannot approve an inactive technician account")
    if current_status is None:
        raise ValidationError("Technician has not completed their profile. Cannot approve.")

    previous = ApprovalStatus(current_status)
    if previous is ApprovalStatus.APPROVED:
        raise ValidationError("Technician is already approved")

    return ApprovalChange(
        technician_user_id=technician_user_id,
        previous_status=previous,
        approval_status=ApprovalStatus.APPROVED,
        updated_at=now or datetime.now(UTC),
    )


def reject(
    technician_user_id: UUID,
    current_status: "str | None",
    actor: Identity,
    now: datetime | None = None,
) -> ApprovalChange:
    """Reject a pending technician application."""
    _assert_admin(actor)
    if current_status is None:
        raise ValidationError("Technician profile not found. Cannot reject.")

    previous = ApprovalStatus(current_status)
    if previous is ApprovalStatus.REJECTED:
        raise ValidationError("Technician has already been rejected")
    if previous is ApprovalStatus.APPROVED:
        raise ValidationError(
            "Cannot reject an already approved technician. Please deactivate their account instead."
        )

    return ApprovalChange(
        technician_user_id=technician_user_id,
        previous_status=previous,
        approval_status=ApprovalStatus.REJECTED,
        updated_at=now or datetime.now(UTC),
    )
