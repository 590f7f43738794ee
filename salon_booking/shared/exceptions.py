"""Application error hierarchy

Every error carries an HTTP status code and a machine-readable code so the
exception handler in ``main.py`` can render it without inspecting the type.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for expected, client-facing failures"""

    def __init__(self, message: str, status_code: int = 500, code: str = "INTERNAL_SERVER_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, 400, "VALIDATION_ERROR")


class NotFoundError(AppError):
    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found: {identifier}" if identifier else f"{resource} not found"
        super().__init__(message, 404, "NOT_FOUND")
        self.resource = resource
        self.identifier = identifier


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, 409, "CONFLICT")


class BusinessRuleError(AppError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, 422, "BUSINESS_RULE_ERROR")
        self.details = details or {}


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, 401, "UNAUTHORIZED")


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, 403, "FORBIDDEN")


__all__ = [
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "BusinessRuleError",
    "UnauthorizedError",
    "ForbiddenError",
]
