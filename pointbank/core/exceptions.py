from enum import Enum
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

CHARGE_AMOUNT_POSITIVE = "Charge amount must be greater than 0"
USE_AMOUNT_POSITIVE = "Use amount must be greater than 0"
INSUFFICIENT_POINTS = "Insufficient points"
AMOUNT_TOO_LARGE = "Amount exceeds the maximum point value"
BALANCE_TOO_LARGE = "Charge would exceed the maximum balance"


class AppError(Exception):
    """Base application error with consistent schema."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class BadRequestError(AppError):
    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class PointErrorKind(str, Enum):
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


class PointError(BadRequestError):
    """A rejected charge/use. Nothing was written when this is raised."""

    kind: PointErrorKind

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=self.kind.value, details=details)


class InvalidAmountError(PointError):
    kind = PointErrorKind.INVALID_AMOUNT


class InsufficientBalanceError(PointError):
    kind = PointErrorKind.INSUFFICIENT_BALANCE


def error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    details: dict[str, Any] | None = None,
) -> ORJSONResponse:
    """Render the shared error envelope, tagged with the request id when one was assigned."""
    body: dict[str, Any] = {"error": {"message": message, "code": code, "details": details or {}}}
    request_id = getattr(request.state, "request_id", None)
    if request_id is not None:
        body["request_id"] = request_id
    return ORJSONResponse(status_code=status_code, content=body)


async def app_exception_handler(request: Request, exc: AppError) -> ORJSONResponse:
    return error_response(request, exc.status_code, exc.message, exc.code, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    # ctx may hold exception objects, which are not JSON
    errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
    return error_response(
        request,
        422,
        "Validation error",
        "VALIDATION_ERROR",
        {"errors": errors},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    from pointbank.core.logging import get_logger
    get_logger(__name__).exception("unhandled_exception", exc_info=exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")
