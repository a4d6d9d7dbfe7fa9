"""Exceptions for the booking domain and RFC 9457 Problem Details responses."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import logging
import uuid

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response


logger = logging.getLogger(__name__)


class BookingErrorKind(str, Enum):
    """Outcome kinds a booking operation can fail with."""
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID = "INVALID"


class BookingError(Exception):
    """
    Failure of a booking operation, tagged with its kind.

    Callers branch on ``kind`` rather than on exception subclasses; the
    request handlers translate each kind into a status code.
    """

    def __init__(
        self,
        kind: BookingErrorKind,
        detail: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.context = context or {}

    @classmethod
    def not_found(cls, detail: str, **context: Any) -> "BookingError":
        return cls(BookingErrorKind.NOT_FOUND, detail, context)

    @classmethod
    def forbidden(cls, detail: str, **context: Any) -> "BookingError":
        return cls(BookingErrorKind.FORBIDDEN, detail, context)

    @classmethod
    def invalid(cls, detail: str, **context: Any) -> "BookingError":
        return cls(BookingErrorKind.INVALID, detail, context)

    def __repr__(self) -> str:
        return f"<BookingError(kind={self.kind.value}, detail='{self.detail}')>"


class ProblemDetailsException(HTTPException):
    """
    Base exception class following RFC 9457 Problem Details for HTTP APIs.

    https://tools.ietf.org/rfc/rfc9457.txt
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Problem Details exception.

        Args:
            status_code: HTTP status code
            title: Short, human-readable summary of the problem type
            detail: Human-readable explanation specific to this occurrence
            type_uri: URI reference that identifies the problem type
            instance: URI reference that identifies the specific occurrence
            extensions: Additional problem-specific information
            headers: HTTP headers to include in response
        """
        self.title = title
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.instance = instance

        self.problem_details = {
            "type": self.type_uri,
            "title": title,
            "status": status_code,
        }
        if detail:
            self.problem_details["detail"] = detail
        if instance:
            self.problem_details["instance"] = instance
        self.problem_details.update(extensions or {})

        super().__init__(
            status_code=status_code,
            detail=self.problem_details,
            headers=headers
        )


class AuthenticationError(ProblemDetailsException):
    """Raised when a request carries no usable bearer token or session."""

    def __init__(
        self,
        detail: str = "Authentication credentials are required",
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            title="Authentication Required",
            detail=detail,
            type_uri="https://example.com/problems/authentication-required",
            instance=instance,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """Render a Problem Details exception as an RFC 9457 JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.problem_details,
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """
    Answer malformed requests with a bare 400.

    Booking endpoints report every failure as a status code without a body,
    and a body or path parameter that does not parse is an ordinary bad
    request rather than FastAPI's default 422.
    """
    logger.info(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg")}
                for error in exc.errors()
            ],
        }
    )
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic exception handler that converts unhandled exceptions to Problem Details format.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path},
        exc_info=exc,
    )

    problem_details = {
        "type": "https://example.com/problems/internal-server-error",
        "title": "Internal Server Error",
        "status": 500,
        "detail": "An unexpected error occurred while processing the request",
        "instance": str(request.url),
        "error_id": error_id,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }

    return JSONResponse(
        status_code=500,
        content=problem_details,
    )
