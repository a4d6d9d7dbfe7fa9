"""Booking-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class BookingRequest(BaseModel):
    """Request body for creating a booking or changing its room."""

    model_config = ConfigDict(populate_by_name=True)

    room_id: StrictInt = Field(..., alias="roomId", description="Room to book")


class BookingRoom(BaseModel):
    """The authenticated user's current booking."""

    id: int = Field(..., description="Booking ID")
    room: int = Field(..., description="ID of the booked room")


class CreateBookingResponse(BaseModel):
    """
    Response for a created booking.

    The field is named ``roomId`` on the wire but carries the booking ID;
    clients of the event platform depend on that shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    booking_id: int = Field(..., serialization_alias="roomId", description="ID of the created booking")


class UpdateBookingResponse(BaseModel):
    """Response for a booking whose room was changed."""

    model_config = ConfigDict(populate_by_name=True)

    booking_id: int = Field(..., serialization_alias="bookingId", description="ID of the updated booking")
