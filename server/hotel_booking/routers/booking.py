"""Booking router: the authenticated user's hotel room booking."""

import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentUserId, DatabaseSession
from ..core.exceptions import BookingError, BookingErrorKind
from ..schemas.booking import BookingRequest, BookingRoom, CreateBookingResponse, UpdateBookingResponse
from ..schemas.common import Problem
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/booking",
    tags=["booking"],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": Problem, "description": "Missing or invalid token"}},
)

STATUS_BY_KIND = {
    BookingErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    BookingErrorKind.INVALID: status.HTTP_400_BAD_REQUEST,
}

MUTATION_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Malformed request or booking not possible"},
    status.HTTP_403_FORBIDDEN: {"description": "User not eligible for a hotel or room full"},
    status.HTTP_404_NOT_FOUND: {"description": "Room does not exist"},
}


async def _failure_response(db: AsyncSession, error: Exception, operation: str, **context) -> Response:
    """Map a failed booking mutation to a bodiless status response."""
    if isinstance(error, BookingError):
        return Response(status_code=STATUS_BY_KIND[error.kind])

    logger.error(
        f"Unexpected error in {operation}",
        extra={**context, "error": str(error)},
        exc_info=True
    )
    await db.rollback()
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


@router.get(
    "",
    response_model=BookingRoom,
    responses={status.HTTP_404_NOT_FOUND: {"description": "User has no booking"}},
)
async def get_booking(
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> Response:
    """Get the authenticated user's booking."""
    booking_service = BookingService(db)

    try:
        booking = await booking_service.find_booking_room(user_id)
    except BookingError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(
            "Unexpected error in booking retrieval",
            extra={"user_id": user_id, "error": str(e)},
            exc_info=True
        )
        await db.rollback()
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    response_data = BookingRoom(id=booking.id, room=booking.room_id)
    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data.model_dump())


@router.post("", response_model=CreateBookingResponse, responses=MUTATION_RESPONSES)
async def create_booking(
    request: BookingRequest,
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> Response:
    """
    Book a room for the authenticated user.

    The response field ``roomId`` carries the ID of the created booking.
    """
    booking_service = BookingService(db)

    try:
        booking = await booking_service.create_booking_room(user_id, request.room_id)
    except Exception as e:
        return await _failure_response(
            db, e, "booking creation", user_id=user_id, room_id=request.room_id
        )

    response_data = CreateBookingResponse(booking_id=booking.id)
    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data.model_dump(by_alias=True))


@router.put("/{booking_id}", response_model=UpdateBookingResponse, responses=MUTATION_RESPONSES)
async def update_booking(
    booking_id: int,
    request: BookingRequest,
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> Response:
    """Move the authenticated user's booking to another room."""
    booking_service = BookingService(db)

    try:
        booking = await booking_service.update_booking_room(user_id, request.room_id, booking_id)
    except Exception as e:
        return await _failure_response(
            db, e, "booking room change", user_id=user_id, room_id=request.room_id, booking_id=booking_id
        )

    response_data = UpdateBookingResponse(booking_id=booking.id)
    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data.model_dump(by_alias=True))
