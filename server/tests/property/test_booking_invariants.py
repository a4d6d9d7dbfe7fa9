"""Property-based tests for room capacity invariants."""

from contextlib import asynccontextmanager

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from conftest import TEST_DATABASE_URL, Factory
from hotel_booking.core.database import Base
from hotel_booking.core.exceptions import BookingError, BookingErrorKind
from hotel_booking.services.booking_service import BookingService

capacity_values = st.integers(min_value=1, max_value=4)
user_counts = st.integers(min_value=1, max_value=8)


@asynccontextmanager
async def fresh_session():
    """A session on a brand-new in-memory database, one per generated example."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)() as session:
            yield session
    finally:
        await engine.dispose()


@pytest.mark.asyncio
@settings(max_examples=25, deadline=None)
@given(capacity=capacity_values, users=user_counts)
async def test_room_never_overbooked(capacity, users):
    """Of N eligible users booking one room, exactly min(capacity, N) succeed."""
    async with fresh_session() as session:
        factory = Factory(session)
        room = await factory.create_room(capacity=capacity)
        service = BookingService(session)

        successes = 0
        for _ in range(users):
            user = await factory.create_eligible_user()
            try:
                await service.create_booking_room(user.id, room.id)
                successes += 1
            except BookingError as e:
                assert e.kind == BookingErrorKind.FORBIDDEN

        assert successes == min(capacity, users)
        assert await service.hotel_service.count_room_bookings(room.id) == min(capacity, users)


@pytest.mark.asyncio
@settings(max_examples=25, deadline=None)
@given(
    capacity=capacity_values,
    moves=st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=10),
)
async def test_room_changes_respect_capacity(capacity, moves):
    """Moving bookings between rooms never pushes a room past its capacity."""
    async with fresh_session() as session:
        factory = Factory(session)
        hotel = await factory.create_hotel()
        rooms = [await factory.create_room(hotel, capacity=capacity) for _ in range(2)]
        service = BookingService(session)

        bookings = []
        for _ in range(capacity):
            user = await factory.create_eligible_user()
            bookings.append(await service.create_booking_room(user.id, rooms[0].id))

        for step, target in enumerate(moves):
            booking = bookings[step % len(bookings)]
            room = rooms[target % len(rooms)]
            try:
                await service.update_booking_room(booking.user_id, room.id, booking.id)
            except BookingError as e:
                assert e.kind == BookingErrorKind.FORBIDDEN

            for candidate in rooms:
                assert await service.hotel_service.count_room_bookings(candidate.id) <= candidate.capacity
