"""Ticket queries."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.ticket import Ticket

logger = logging.getLogger(__name__)


class TicketService:
    """Service for ticket lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_ticket_by_enrollment_id(self, enrollment_id: int) -> Ticket | None:
        """
        Get the ticket bought for an enrollment, with its ticket type loaded.

        An enrollment normally has a single ticket; if several exist the
        earliest one is returned.
        """
        stmt = (
            select(Ticket)
            .options(selectinload(Ticket.ticket_type))
            .where(Ticket.enrollment_id == enrollment_id)
            .order_by(Ticket.id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
