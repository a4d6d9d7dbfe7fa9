"""Service layer package."""

from .booking_service import BookingService
from .enrollment_service import EnrollmentService
from .hotel_service import HotelService
from .ticket_service import TicketService

__all__ = [
    "BookingService",
    "EnrollmentService",
    "HotelService",
    "TicketService",
]
