"""Authentication error taxonomy."""

__all__ = [
    "ERPAuthError",
    "AccountDisabledError",
    "AccountLockedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "PasswordValidationError",
    "PolicyMisconfigurationError",
]

from erpauth.exceptions.errors import (
    AccountDisabledError,
    AccountLockedError,
    ERPAuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordValidationError,
    PolicyMisconfigurationError,
)
