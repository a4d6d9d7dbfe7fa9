"""Unit tests for bearer-token authentication on booking endpoints."""

import jwt
import pytest

from conftest import auth_headers, create_token
from hotel_booking.core.config import settings


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [("get", "/booking"), ("post", "/booking"), ("put", "/booking/0")],
)
async def test_missing_token_is_unauthorized(test_client, method, path):
    """Requests without an Authorization header get 401."""
    response = await test_client.request(method.upper(), path)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    data = response.json()
    assert data["status"] == 401
    assert data["title"] == "Authentication Required"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [("get", "/booking"), ("post", "/booking"), ("put", "/booking/0")],
)
async def test_invalid_token_is_unauthorized(test_client, method, path):
    """A token that is not a valid JWT gets 401."""
    response = await test_client.request(method.upper(), path, headers=auth_headers("lorem"))

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [("get", "/booking"), ("post", "/booking"), ("put", "/booking/0")],
)
async def test_token_without_session_is_unauthorized(test_client, factory, method, path):
    """A correctly signed token is refused once no session holds it."""
    user = await factory.create_user()
    token = create_token(user.id)

    response = await test_client.request(method.upper(), path, headers=auth_headers(token))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_unauthorized(test_client, factory):
    """Tokens signed with a different secret do not verify."""
    user = await factory.create_user()
    token = jwt.encode({"userId": user.id}, "another-secret-key-with-at-least-32-bytes", algorithm="HS256")

    response = await test_client.get("/booking", headers=auth_headers(token))

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer a b"])
async def test_malformed_authorization_header_is_unauthorized(test_client, header):
    """Only the ``Bearer <token>`` form is accepted."""
    response = await test_client.get("/booking", headers={"Authorization": header})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_without_user_id_claim_is_unauthorized(test_client):
    """A verified token must carry an integer userId."""
    token = jwt.encode({"userId": "1"}, settings.jwt_secret, algorithm="HS256")

    response = await test_client.get("/booking", headers=auth_headers(token))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_valid_session_passes_authentication(test_client, factory):
    """With a live session the request reaches the booking handler."""
    user = await factory.create_user()
    token = await factory.create_session(user)

    response = await test_client.get("/booking", headers=auth_headers(token))

    assert response.status_code == 404
