"""Test configuration and fixtures."""

import os

# Point the application at an in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes"

from datetime import date
from itertools import count

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_booking.core.config import settings
from hotel_booking.core.database import Base, get_db
from hotel_booking.core.dependencies import TOKEN_ALGORITHM
from hotel_booking.models import (
    Booking,
    Enrollment,
    Hotel,
    Room,
    Ticket,
    TicketStatus,
    TicketType,
    User,
    UserSession,
)

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def create_token(user_id: int) -> str:
    """Sign a bearer token the way the sign-in flow does."""
    return jwt.encode({"userId": user_id}, settings.jwt_secret, algorithm=TOKEN_ALGORITHM)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class Factory:
    """Builds persisted test records on a session."""

    _sequence = count(1)

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, entity):
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create_user(self) -> User:
        n = next(self._sequence)
        return await self._save(User(email=f"user{n}@example.com", password="hashed-password"))

    async def create_session(self, user: User) -> str:
        """Persist a session for the user and return its bearer token."""
        token = create_token(user.id)
        await self._save(UserSession(user_id=user.id, token=token))
        return token

    async def create_enrollment(self, user: User) -> Enrollment:
        return await self._save(Enrollment(
            user_id=user.id,
            name="Test Attendee",
            cpf="12345678909",
            birthday=date(1995, 5, 17),
            phone="(21) 98999-9999",
        ))

    async def create_ticket_type(self, is_remote: bool = False, includes_hotel: bool = True) -> TicketType:
        return await self._save(TicketType(
            name="Presencial com hotel" if includes_hotel else "Presencial",
            price=60000,
            is_remote=is_remote,
            includes_hotel=includes_hotel,
        ))

    async def create_ticket(
        self,
        enrollment: Enrollment,
        ticket_type: TicketType,
        status: TicketStatus = TicketStatus.PAID,
    ) -> Ticket:
        return await self._save(Ticket(
            enrollment_id=enrollment.id,
            ticket_type_id=ticket_type.id,
            status=status,
        ))

    async def create_hotel(self) -> Hotel:
        return await self._save(Hotel(name="Driven Resort", image="https://example.com/hotel.jpg"))

    async def create_room(self, hotel: Hotel | None = None, capacity: int = 3) -> Room:
        hotel = hotel or await self.create_hotel()
        n = next(self._sequence)
        return await self._save(Room(name=f"Room {n}", capacity=capacity, hotel_id=hotel.id))

    async def create_booking(self, user: User, room: Room) -> Booking:
        return await self._save(Booking(user_id=user.id, room_id=room.id))

    async def create_eligible_user(
        self,
        status: TicketStatus = TicketStatus.PAID,
        is_remote: bool = False,
        includes_hotel: bool = True,
    ) -> User:
        """User with an enrollment and a ticket of the given kind."""
        user = await self.create_user()
        enrollment = await self.create_enrollment(user)
        ticket_type = await self.create_ticket_type(is_remote=is_remote, includes_hotel=includes_hotel)
        await self.create_ticket(enrollment, ticket_type, status)
        return user


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def factory(test_session) -> Factory:
    """Record factory bound to the test session."""
    return Factory(test_session)


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create the FastAPI application with the database dependency overridden."""
    from hotel_booking.main import create_app

    app = create_app()

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
