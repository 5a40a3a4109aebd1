"""Technician and user profile access against the hosted database."""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from techcare.core.exceptions import ConflictError
from techcare.domain.availability import AvailabilityChange
from techcare.domain.technician_approval import ApprovalChange
from techcare.models.user import TechnicianDetails, User
from techcare.services.base import collaborator_errors

logger = logging.getLogger(__name__)


class TechnicianStore:
    """Technician details and the user rows they hang off."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_details(self, user_id: UUID) -> TechnicianDetails | None:
        with collaborator_errors("technician fetch"):
            result = await self.db.execute(
                select(TechnicianDetails).where(TechnicianDetails.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def set_availability(self, change: AvailabilityChange) -> TechnicianDetails | None:
        """Write the flag and timestamp. Returns ``None`` if there is no such technician."""
        stmt = (
            update(TechnicianDetails)
            .where(TechnicianDetails.user_id == change.technician_user_id)
            .values(is_available=change.is_available, updated_at=change.updated_at)
            .returning(TechnicianDetails)
            .execution_options(synchronize_session="fetch")
        )
        with collaborator_errors("technician availability update"):
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

    async def get_technician_user(self, user_id: UUID) -> User | None:
        with collaborator_errors("technician user fetch"):
            result = await self.db.execute(
                select(User).where(User.id == user_id, User.role == "TECHNICIAN")
            )
            return result.scalar_one_or_none()

    async def set_approval_status(self, change: ApprovalChange) -> TechnicianDetails:
        """Write an approval decision made against ``change.previous_status``."""
        stmt = (
            update(TechnicianDetails)
            .where(
                TechnicianDetails.user_id == change.technician_user_id,
                TechnicianDetails.approval_status == change.previous_status.value,
            )
            .values(approval_status=change.approval_status.value, updated_at=change.updated_at)
            .returning(TechnicianDetails)
            .execution_options(synchronize_session="fetch")
        )
        with collaborator_errors("technician approval update"):
            result = await self.db.execute(stmt)
            details = result.scalar_one_or_none()

        if details is None:
            raise ConflictError(
                f"Technician {change.technician_user_id} is no longer "
                f"{change.previous_status.value}; reload and try again"
            )
        logger.info(
            f"Technician {change.technician_user_id} {change.previous_status.value} -> "
            f"{change.approval_status.value}",
            extra={"user_id": change.technician_user_id},
        )
        return details

    async def get_user_role(self, user_id: UUID) -> str | None:
        with collaborator_errors("user role fetch"):
            result = await self.db.execute(
                select(User.role).where(User.id == user_id, User.is_active.is_(True))
            )
            return result.scalar_one_or_none()

    async def get_customers(self, user_ids: list[UUID]) -> dict[UUID, User]:
        """Bulk-load users by id. Missing rows are simply absent."""
        if not user_ids:
            return {}
        with collaborator_errors("customer details fetch"):
            async with self.db.begin_nested():
                result = await self.db.execute(select(User).where(User.id.in_(user_ids)))
                return {user.id: user for user in result.scalars().all()}
