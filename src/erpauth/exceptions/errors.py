"""Exceptions raised by the authentication layer.

Each exception carries the HTTP status and machine-readable error code the
surrounding web layer should answer with, so callers can render a
consistent error body without knowing every subclass.
"""

from datetime import datetime


class ERPAuthError(Exception):
    """Base class for all authentication errors.

    Attributes
    ----------
    status_code : int
        HTTP status the error maps to
    error_code : str
        Stable machine-readable error identifier
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__.splitlines()[0])

    def to_dict(self) -> dict:
        """Return the error as a JSON-serializable response body.

        Returns
        -------
        dict
            Mapping with ``detail``, ``error_code`` and ``timestamp``
        """
        return {
            "detail": str(self),
            "error_code": self.error_code,
            "timestamp": datetime.now().isoformat(),
        }


class InvalidCredentialsError(ERPAuthError):
    """Invalid username or password."""

    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class InvalidTokenError(ERPAuthError):
    """Token is invalid or expired."""

    status_code = 401
    error_code = "INVALID_TOKEN"


class AccountDisabledError(ERPAuthError):
    """Account is disabled."""

    status_code = 403
    error_code = "ACCOUNT_DISABLED"


class AccountLockedError(ERPAuthError):
    """Account is temporarily locked."""

    status_code = 403
    error_code = "ACCOUNT_LOCKED"


class PasswordValidationError(ERPAuthError):
    """Password does not satisfy the password policy."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class PolicyMisconfigurationError(ERPAuthError):
    """Password policy configuration is invalid."""

    status_code = 500
    error_code = "POLICY_MISCONFIGURED"
