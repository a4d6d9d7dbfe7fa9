#!/usr/bin/env python3
"""Seed a development database with hotels, ticket types, and a demo attendee."""

import asyncio
import logging
from datetime import date

import jwt
from sqlalchemy import func, select

from hotel_booking.core.config import settings
from hotel_booking.core.database import async_session_factory, close_db, init_db
from hotel_booking.core.dependencies import TOKEN_ALGORITHM
from hotel_booking.models import (
    Enrollment,
    Hotel,
    Room,
    Ticket,
    TicketStatus,
    TicketType,
    User,
    UserSession,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HOTELS = {
    "Driven Resort": [("101", 1), ("102", 2), ("103", 3)],
    "Driven Palace": [("201", 2), ("202", 3), ("203", 3)],
    "Driven World": [("301", 1), ("302", 1), ("303", 2)],
}

TICKET_TYPES = [
    ("Online", 10000, True, False),
    ("Presencial sem hotel", 25000, False, False),
    ("Presencial com hotel", 60000, False, True),
]


async def create_sample_data() -> str | None:
    """
    Insert hotels, rooms, ticket types, and one eligible demo user.

    Returns:
        A bearer token for the demo user, or None if data already existed
    """
    async with async_session_factory() as db:
        existing_hotels = await db.execute(select(func.count()).select_from(Hotel))
        if existing_hotels.scalar_one() > 0:
            logger.info("Sample data already exists, skipping...")
            return None

        for hotel_name, rooms in HOTELS.items():
            hotel = Hotel(name=hotel_name, image="https://example.com/hotel.jpg")
            hotel.rooms = [Room(name=name, capacity=capacity) for name, capacity in rooms]
            db.add(hotel)

        ticket_types = [
            TicketType(name=name, price=price, is_remote=is_remote, includes_hotel=includes_hotel)
            for name, price, is_remote, includes_hotel in TICKET_TYPES
        ]
        db.add_all(ticket_types)

        user = User(email="demo@example.com", password="not-a-real-hash")
        db.add(user)
        await db.flush()

        enrollment = Enrollment(
            user_id=user.id,
            name="Demo Attendee",
            cpf="12345678909",
            birthday=date(1990, 1, 1),
            phone="(21) 98999-9999",
        )
        db.add(enrollment)
        await db.flush()

        db.add(Ticket(
            enrollment_id=enrollment.id,
            ticket_type_id=ticket_types[-1].id,
            status=TicketStatus.PAID,
        ))

        token = jwt.encode({"userId": user.id}, settings.jwt_secret, algorithm=TOKEN_ALGORITHM)
        db.add(UserSession(user_id=user.id, token=token))

        await db.commit()
        logger.info("Sample data created successfully!")
        return token


async def main():
    """Main setup function."""
    logger.info("Creating tables...")
    await init_db()

    try:
        token = await create_sample_data()
    finally:
        await close_db()

    if token:
        logger.info(f"Demo user bearer token: {token}")
    logger.info("Start the API server with: uvicorn hotel_booking.main:app --reload")


if __name__ == "__main__":
    asyncio.run(main())
