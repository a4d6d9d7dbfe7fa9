"""Models module exporting all database models."""

from .booking import Booking
from .enrollment import Enrollment
from .hotel import Hotel, Room
from .ticket import Ticket, TicketStatus, TicketType
from .user import User, UserSession

__all__ = [
    # Identity
    "User",
    "UserSession",

    # Registration
    "Enrollment",
    "Ticket",
    "TicketStatus",
    "TicketType",

    # Lodging
    "Hotel",
    "Room",
    "Booking",
]
