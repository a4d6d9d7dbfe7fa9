"""Hotel and room queries."""

import logging

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import is_postgresql
from ..models.booking import Booking
from ..models.hotel import Room

logger = logging.getLogger(__name__)


class HotelService:
    """Service for room lookups and occupancy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_room_by_id(self, room_id: int) -> Room | None:
        """Get room by ID."""
        stmt = select(Room).where(Room.id == room_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_room(self, room_id: int) -> None:
        """
        Serialize booking changes on a room until the transaction ends.

        Uses a PostgreSQL transaction-scoped advisory lock keyed by room ID.
        Other dialects (SQLite in tests) have no equivalent and skip it.
        """
        if not is_postgresql(self.db):
            return

        await self.db.execute(
            text("SELECT pg_advisory_xact_lock(:room_id)"),
            {"room_id": room_id}
        )
        logger.debug("Acquired advisory lock for room", extra={"room_id": room_id})

    async def count_room_bookings(self, room_id: int, exclude_booking_id: int | None = None) -> int:
        """
        Count bookings currently assigned to a room.

        Args:
            room_id: Room to count bookings for
            exclude_booking_id: Booking left out of the count, used when that
                booking is the one being moved

        Returns:
            Number of bookings referencing the room
        """
        stmt = select(func.count()).select_from(Booking).where(Booking.room_id == room_id)
        if exclude_booking_id is not None:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()
