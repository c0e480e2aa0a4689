"""
haatbazar/core/errors.py - Application error taxonomy and HTTP mapping.

Services raise these exceptions; the handlers registered by `register_exception_handlers`
turn them into `{"detail": ...}` JSON responses. Storage-layer details never reach the
client: `InternalError` and unknown exceptions are answered with a generic message and the
original cause is only logged.
"""
import contextlib
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("haatbazar.errors")


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class InvalidQuantity(InvalidInput):
    detail = "Quantity must be a positive integer"


class InvalidRating(InvalidInput):
    detail = "Rating must be between 1 and 5"


class InvalidStatus(InvalidInput):
    detail = "Unknown status"


class AuthenticationRequired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication required"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Permission denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class ProductNotFound(NotFound):
    detail = "Product not found"


class OrderNotFound(NotFound):
    detail = "Order not found"


class ReviewNotFound(NotFound):
    detail = "Review not found"


class TransactionNotFound(NotFound):
    detail = "Transaction not found"


class CartLineNotFound(NotFound):
    detail = "Product is not in the cart"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Conflict"


class DuplicateReview(Conflict):
    detail = "You have already reviewed this product"


class DuplicateTransaction(Conflict):
    detail = "Transaction already recorded"


class ConcurrentModification(AppError):
    """Optimistic-concurrency conflict. Retryable; callers should not see it."""
    status_code = status.HTTP_409_CONFLICT
    detail = "Concurrent modification"


class PersistenceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Storage temporarily unavailable"


class InternalError(AppError):
    pass


def _json(exc_status: int, detail) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc_status == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc_status, content={"detail": detail}, headers=headers)


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, (InternalError, ConcurrentModification)):
        cause = exc.__cause__ or exc
        logger.error("%s %s failed: %r", request.method, request.url.path, cause, exc_info=cause)
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.detail)
    if isinstance(exc, PersistenceUnavailable):
        logger.warning("%s %s: store unavailable (%r)", request.method, request.url.path, exc.__cause__)
        return _json(exc.status_code, PersistenceUnavailable.detail)
    return _json(exc.status_code, exc.detail)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return _json(status.HTTP_400_BAD_REQUEST, errors)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


@contextlib.contextmanager
def unexpected_as_internal(operation: str):
    """Let taxonomy errors through; log anything else and re-raise it as `InternalError`."""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception("%s failed", operation)
        raise InternalError() from exc
