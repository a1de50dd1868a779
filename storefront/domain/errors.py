# storefront/domain/errors.py
"""
Application errors.

Every error carries a stable numeric code so clients can pick the message to
show without parsing text. Handlers in ``storefront.main`` render them as
``{"message", "errorCode", "errors"}``.
"""
import enum
from typing import Any


class ErrorCode(enum.IntEnum):
    USER_NOT_FOUND = 1001
    USER_ALREADY_EXISTS = 1002
    INCORRECT_PASSWORD = 1003
    ADDRESS_DOES_NOT_BELONG = 1004
    UNPROCESSABLE_ENTITY = 2001
    INTERNAL_EXCEPTION = 3001
    UNAUTHORIZED = 4001
    CHECKOUT_IN_PROGRESS = 4002
    PRODUCT_NOT_FOUND = 5001
    ADDRESS_NOT_FOUND = 5002
    ORDER_NOT_FOUND = 5003
    CART_ITEM_NOT_FOUND = 5004
    PRODUCT_IN_USE = 5005
    INVALID_ORDER_STATUS = 6001


class HttpError(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: ErrorCode, errors: Any = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.errors = errors


class BadRequestError(HttpError):
    status_code = 400


class UnauthorizedError(HttpError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized", error_code: ErrorCode = ErrorCode.UNAUTHORIZED, errors: Any = None):
        super().__init__(message, error_code, errors)


class NotFoundError(HttpError):
    status_code = 404


class ConflictError(HttpError):
    status_code = 409
