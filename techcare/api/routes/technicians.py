"""Technician endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from techcare.api.deps import CurrentIdentity, Technicians
from techcare.core.exceptions import NotFoundError
from techcare.core.permissions import require_admin
from techcare.domain.auth_session import Identity
from techcare.domain.availability import set_availability
from techcare.domain.technician_approval import ApprovalChange, approve, reject
from techcare.schemas.technician import (
    ApprovalEnvelope,
    AvailabilityEnvelope,
    AvailabilityUpdate,
    TechnicianDetailsResponse,
)
from techcare.services.technician_store import TechnicianStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/{technician_id}/availability", response_model=AvailabilityEnvelope)
async def update_availability(
    technician_id: UUID,
    request: AvailabilityUpdate,
    current_user: CurrentIdentity,
    technicians: Technicians,
) -> AvailabilityEnvelope:
    """Toggle a technician's availability (the technician themself only).

    ``technician_id`` is the technician's user id.
    """
    change = set_availability(technician_id, current_user.user_id, request.is_available)

    technician = await technicians.set_availability(change)
    if not technician:
        raise NotFoundError("Technician", str(technician_id))

    logger.info(
        f"Technician availability updated: {technician_id} -> {change.is_available}",
        extra={"user_id": current_user.user_id},
    )
    return AvailabilityEnvelope(
        technician=TechnicianDetailsResponse.model_validate(technician),
        message=f"Availability {'enabled' if change.is_available else 'disabled'}",
    )


async def _save_review(technicians: TechnicianStore, change: ApprovalChange, message: str) -> ApprovalEnvelope:
    details = await technicians.set_approval_status(change)
    return ApprovalEnvelope(
        technician=TechnicianDetailsResponse.model_validate(details),
        previous_status=change.previous_status.value,
        message=message,
    )


@router.put("/{technician_id}/approve", response_model=ApprovalEnvelope)
async def approve_technician(
    technician_id: UUID,
    current_user: Annotated[Identity, Depends(require_admin)],
    technicians: Technicians,
) -> ApprovalEnvelope:
    """Approve a pending or rejected technician (admin only)."""
    user = await technicians.get_technician_user(technician_id)
    if not user:
        raise NotFoundError("Technician", str(technician_id))
    details = await technicians.get_details(technician_id)

    change = approve(
        technician_id,
        details.approval_status if details else None,
        user.is_active,
        current_user,
    )
    return await _save_review(technicians, change, "Technician approved successfully")


@router.put("/{technician_id}/reject", response_model=ApprovalEnvelope)
async def reject_technician(
    technician_id: UUID,
    current_user: Annotated[Identity, Depends(require_admin)],
    technicians: Technicians,
) -> ApprovalEnvelope:
    """Reject a pending technician application (admin only)."""
    user = await technicians.get_technician_user(technician_id)
    if not user:
        raise NotFoundError("Technician", str(technician_id))
    details = await technicians.get_details(technician_id)

    change = reject(technician_id, details.approval_status if details else None, current_user)
    return await _save_review(technicians, change, "Technician application rejected successfully")
