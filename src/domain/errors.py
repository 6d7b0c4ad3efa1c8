"""Failures raised by domain services and translated to HTTP by the routers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for domain service failures."""


class ValidationFailedError(ServiceError):
    """Raised when input is malformed or missing; carries field-level detail."""

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class ConflictError(ServiceError):
    """Raised when a write would violate a uniqueness rule."""


class NotFoundError(ServiceError):
    """Raised when an operation targets a record that does not exist."""


class InvalidCredentialsError(ServiceError):
    """Raised when login credentials are invalid."""


class InvalidTokenError(ServiceError):
    """Raised when a token is malformed, expired, or names an inactive user.

    The cases are deliberately indistinguishable to callers.
    """
