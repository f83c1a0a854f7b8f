"""
Custom exceptions for the application.
"""


class LectioException(Exception):
    """Base exception for all Lectio application exceptions."""
    code = "SERVER_ERROR"


class ValidationError(LectioException):
    """Raised when validation fails (malformed payload, no valid events, unknown item type)."""
    code = "BAD_REQUEST"


class NotFoundError(LectioException):
    """Raised when a requested resource is not found."""
    code = "NOT_FOUND"


class AuthenticationError(LectioException):
    """Raised when the caller identity is missing."""
    code = "UNAUTHORIZED"


class StoreFailure(LectioException):
    """Raised when a transaction or write against the store fails."""
    code = "SERVER_ERROR"
