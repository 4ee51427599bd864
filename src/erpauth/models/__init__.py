"""Pydantic models for request/response validation."""

__all__ = [
    "AuthenticatedUser",
    "ChangePasswordRequest",
    "IssuedTokens",
    "LoginRequest",
    "LoginResult",
    "PasswordPolicyResponse",
    "PasswordStatus",
    "TokenData",
    "UserSummary",
]

from erpauth.models.auth import (
    AuthenticatedUser,
    ChangePasswordRequest,
    IssuedTokens,
    LoginRequest,
    LoginResult,
    PasswordPolicyResponse,
    PasswordStatus,
    TokenData,
    UserSummary,
)
