# app/domain/errors.py
"""
Domain exceptions raised by services.

Every error carries the HTTP status and a short machine code; the API layer
(app/api/errors.py) turns them into ``{"error", "message", "details"}``.
"""
from typing import Any, List


class DomainError(Exception):
    status_code = 400
    code = "domain_error"

    def __init__(self, message: str, details: List[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


# 400 - bad input
class ValidationFailed(DomainError, ValueError):
    code = "validation_error"


# 400 - input is well formed but state does not allow the operation
class PreconditionFailed(DomainError, ValueError):
    code = "precondition_failed"


class AddressRequiredError(PreconditionFailed):
    code = "address_required"


class AddressNotFoundError(PreconditionFailed):
    code = "address_not_found"


class ItemsNotFoundError(PreconditionFailed):
    code = "item_not_found"

    def __init__(self, missing_ids: List[int]):
        super().__init__(
            "One or more order items were not found.",
            details=[{"field": "items", "itemId": str(i)} for i in missing_ids],
        )
        self.missing_ids = missing_ids


class CategoryNotFoundError(PreconditionFailed):
    code = "category_not_found"


class InvalidPasswordError(PreconditionFailed):
    code = "invalid_password"


# 401
class AuthenticationError(DomainError):
    status_code = 401
    code = "unauthorized"


# 403
class ForbiddenError(DomainError):
    status_code = 403
    code = "forbidden"


# 404
class NotFoundError(DomainError, LookupError):
    status_code = 404
    code = "not_found"


class OrderNotFoundError(NotFoundError):
    pass


# 409
class ConflictError(DomainError):
    status_code = 409
    code = "conflict"


class InvalidStatusTransitionError(ConflictError):
    code = "invalid_transition"


# 500 - details of the storage failure never leave the service
class OrderPlacementError(DomainError, RuntimeError):
    status_code = 500
    code = "internal_error"


class OrderTimeoutError(OrderPlacementError):
    pass
