"""Booking service: hotel eligibility rules and room assignment."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import BookingError
from ..core.observability import metrics_collector
from ..models.booking import Booking
from ..models.hotel import Room
from ..models.ticket import Ticket, TicketStatus
from .enrollment_service import EnrollmentService
from .hotel_service import HotelService
from .ticket_service import TicketService

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.enrollment_service = EnrollmentService(db)
        self.ticket_service = TicketService(db)
        self.hotel_service = HotelService(db)

    def _reject(self, error: BookingError, reason: str) -> BookingError:
        """Log and count a rejected request, returning the error to raise."""
        logger.warning(
            "Booking request rejected",
            extra={"reason": reason, "kind": error.kind.value, **error.context}
        )
        metrics_collector.record_rejection(reason)
        return error

    async def find_booking_room(self, user_id: int) -> Booking:
        """
        Get the user's booking with its room loaded.

        Raises:
            BookingError: NOT_FOUND if the user has no booking
        """
        stmt = select(Booking).options(selectinload(Booking.room)).where(Booking.user_id == user_id)
        result = await self.db.execute(stmt)
        booking = result.scalar_one_or_none()

        if not booking:
            raise BookingError.not_found("User has no booking", user_id=user_id)

        return booking

    async def check_hotel_eligibility(self, user_id: int) -> Ticket:
        """
        Verify the user may stay at an event hotel.

        The user needs an enrollment whose ticket is paid, in person, and
        includes hotel access.

        Returns:
            The qualifying ticket

        Raises:
            BookingError: FORBIDDEN on the first rule the user fails
        """
        enrollment = await self.enrollment_service.get_enrollment_by_user_id(user_id)
        if not enrollment:
            raise self._reject(
                BookingError.forbidden("User has no enrollment", user_id=user_id),
                reason="no_enrollment"
            )

        ticket = await self.ticket_service.get_ticket_by_enrollment_id(enrollment.id)
        if not ticket:
            raise self._reject(
                BookingError.forbidden("Enrollment has no ticket", user_id=user_id, enrollment_id=enrollment.id),
                reason="no_ticket"
            )

        if ticket.status != TicketStatus.PAID:
            raise self._reject(
                BookingError.forbidden("Ticket is not paid", user_id=user_id, ticket_id=ticket.id),
                reason="ticket_not_paid"
            )

        if not ticket.ticket_type.grants_hotel:
            raise self._reject(
                BookingError.forbidden(
                    "Ticket type does not grant hotel access",
                    user_id=user_id,
                    ticket_type_id=ticket.ticket_type_id,
                    is_remote=ticket.ticket_type.is_remote,
                    includes_hotel=ticket.ticket_type.includes_hotel,
                ),
                reason="ticket_without_hotel"
            )

        return ticket

    async def get_room_or_raise(self, room_id: int) -> Room:
        """Get room by ID or raise a NOT_FOUND booking error."""
        room = await self.hotel_service.get_room_by_id(room_id)
        if not room:
            raise self._reject(
                BookingError.not_found("Room does not exist", room_id=room_id),
                reason="room_not_found"
            )
        return room

    async def check_vacancy(self, room: Room, exclude_booking_id: int | None = None) -> int:
        """
        Verify the room has a free place.

        Returns:
            Current number of bookings in the room

        Raises:
            BookingError: FORBIDDEN if the room is full
        """
        occupancy = await self.hotel_service.count_room_bookings(room.id, exclude_booking_id)
        if occupancy >= room.capacity:
            raise self._reject(
                BookingError.forbidden(
                    "Room has no vacancy",
                    room_id=room.id,
                    capacity=room.capacity,
                    occupancy=occupancy,
                ),
                reason="room_full"
            )
        return occupancy

    async def create_booking_room(self, user_id: int, room_id: int) -> Booking:
        """
        Book a room for the user.

        Args:
            user_id: Authenticated user
            room_id: Room to book

        Returns:
            Created booking entity

        Raises:
            BookingError: FORBIDDEN if the user is not eligible or the room is
                full, NOT_FOUND if the room does not exist, INVALID if the
                user already holds a booking
        """
        await self.check_hotel_eligibility(user_id)
        room = await self.get_room_or_raise(room_id)

        # Held until commit so concurrent requests cannot both take the last place
        await self.hotel_service.lock_room(room.id)
        occupancy = await self.check_vacancy(room)

        existing_booking = await self.get_booking_by_user_id(user_id)
        if existing_booking:
            raise self._reject(
                BookingError.invalid(
                    "User already has a booking",
                    user_id=user_id,
                    booking_id=existing_booking.id,
                ),
                reason="booking_exists"
            )

        booking = Booking(user_id=user_id, room_id=room.id)
        self.db.add(booking)

        await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_booking_created()
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "room_id": room.id,
                "occupancy": occupancy + 1,
                "capacity": room.capacity
            }
        )

        return booking

    async def update_booking_room(self, user_id: int, room_id: int, booking_id: int) -> Booking:
        """
        Move the user's booking to another room.

        The booking being moved is left out of the target room's occupancy,
        so re-selecting the room it already occupies succeeds.

        Args:
            user_id: Authenticated user
            room_id: Room to move the booking to
            booking_id: Booking to move

        Returns:
            Updated booking entity

        Raises:
            BookingError: FORBIDDEN if the user is not eligible, the room is
                full, or the booking does not exist or belongs to someone
                else; NOT_FOUND if the room does not exist
        """
        await self.check_hotel_eligibility(user_id)
        room = await self.get_room_or_raise(room_id)

        await self.hotel_service.lock_room(room.id)
        occupancy = await self.check_vacancy(room, exclude_booking_id=booking_id)

        booking = await self.get_booking_by_id(booking_id)
        if not booking or booking.user_id != user_id:
            raise self._reject(
                BookingError.forbidden(
                    "Booking does not belong to user",
                    user_id=user_id,
                    booking_id=booking_id,
                ),
                reason="booking_not_owned"
            )

        previous_room_id = booking.room_id
        booking.room_id = room.id
        self.db.add(booking)

        await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_room_changed()
        logger.info(
            "Booking room changed successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "previous_room_id": previous_room_id,
                "room_id": room.id,
                "occupancy": occupancy + 1,
                "capacity": room.capacity
            }
        )

        return booking

    async def get_booking_by_id(self, booking_id: int) -> Booking | None:
        """Get booking by ID."""
        stmt = select(Booking).where(Booking.id == booking_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_booking_by_user_id(self, user_id: int) -> Booking | None:
        """Get the booking held by a user."""
        stmt = select(Booking).where(Booking.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
