"""Enrollment queries."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.enrollment import Enrollment

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for enrollment lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_enrollment_by_user_id(self, user_id: int) -> Enrollment | None:
        """Get the enrollment a user registered, if any."""
        stmt = select(Enrollment).where(Enrollment.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
