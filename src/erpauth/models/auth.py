"""Pydantic models for authentication."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

# Response records are serialized for the web layer in camelCase.
_RESPONSE_CONFIG = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}


def _reject_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class LoginRequest(BaseModel):
    """Request model for user login.

    Attributes
    ----------
    username : str
        Account username
    password : str
        Account password
    """

    username: str = Field(..., description="Account username", min_length=1)
    password: str = Field(..., description="Account password", min_length=1, repr=False)

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject whitespace-only credentials."""
        return _reject_blank(v)

    model_config = {"json_schema_extra": {"example": {"username": "admin", "password": "password123"}}}


class ChangePasswordRequest(BaseModel):
    """Request model for changing a password."""

    old_password: str = Field(..., description="Current password", min_length=1, repr=False)
    new_password: str = Field(..., description="New password", min_length=1, repr=False)

    @field_validator("old_password", "new_password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _reject_blank(v)

    model_config = {**_RESPONSE_CONFIG, "frozen": False}


class AuthenticatedUser(BaseModel):
    """Identity and credential state of a verified user.

    Owned by the credential verifier; read-only to everything else.

    Attributes
    ----------
    id : int
        User ID
    username : str
        Login name
    name : str
        Display name
    email : str | None
        Email address
    role : str
        Role code
    role_name : str
        Role display name
    password_changed_at : datetime | None
        When the password was last changed
    password_age_days : int | None
        Password age in days, when the verifier reports an age instead of
        a timestamp. Takes precedence over ``password_changed_at``.
    password_policy_exempt : bool
        Whether the password expiry policy skips this account
    """

    id: int
    username: str
    name: str
    email: str | None = None
    role: str
    role_name: str
    password_changed_at: datetime | None = None
    password_age_days: int | None = Field(default=None, ge=0)
    password_policy_exempt: bool = False

    model_config = {"frozen": True}


class UserSummary(BaseModel):
    """User information returned with a login result."""

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    name: str = Field(..., description="Display name")
    email: str | None = Field(default=None, description="Email")
    role: str = Field(..., description="Role code")
    role_name: str = Field(..., description="Role name")

    model_config = _RESPONSE_CONFIG

    @classmethod
    def from_user(cls, user: AuthenticatedUser) -> "UserSummary":
        """Build the summary exposed to clients from a verified user."""
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            role=user.role,
            role_name=user.role_name,
        )


class IssuedTokens(BaseModel):
    """Tokens minted by a token issuer.

    Attributes
    ----------
    access_token : str
        Access token
    refresh_token : str
        Refresh token
    expires_in : int
        Access token lifetime in seconds
    """

    access_token: str
    refresh_token: str
    expires_in: int = Field(..., ge=0)

    model_config = {"frozen": True}


class PasswordStatus(BaseModel):
    """Password expiry state of an account.

    Attributes
    ----------
    remaining_days : int
        Days before forced expiry, 0 once expired, -1 when the policy
        does not apply
    expired : bool
        Whether the password has expired
    change_required : bool
        Whether the user must be asked to change the password
    """

    remaining_days: int = -1
    expired: bool = False
    change_required: bool = False

    model_config = _RESPONSE_CONFIG


class LoginResult(BaseModel):
    """Response model for a successful login or token refresh."""

    access_token: str = Field(..., description="Access token")
    refresh_token: str = Field(..., description="Refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")
    user: UserSummary = Field(..., description="User information")
    password_expired: bool = Field(default=False, description="Whether the password has expired")
    password_remaining_days: int = Field(
        default=-1, description="Days until the password expires (-1 means not applicable)"
    )
    password_change_required: bool = Field(
        default=False, description="Whether the password must be changed"
    )

    model_config = {
        **_RESPONSE_CONFIG,
        "json_schema_extra": {
            "example": {
                "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refreshToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "tokenType": "Bearer",
                "expiresIn": 86400,
                "user": {
                    "id": 1,
                    "username": "admin",
                    "name": "Administrator",
                    "email": "admin@example.com",
                    "role": "ADMIN",
                    "roleName": "System Administrator",
                },
                "passwordExpired": False,
                "passwordRemainingDays": 5,
                "passwordChangeRequired": True,
            }
        },
    }


class TokenData(BaseModel):
    """Data extracted from a verified token.

    Attributes
    ----------
    user_id : int
        Token subject
    token_type : str
        ``access`` or ``refresh``
    username : str | None
        Username (access tokens only)
    roles : list[str]
        Role codes (access tokens only)
    exp : datetime
        Token expiration timestamp
    """

    user_id: int
    token_type: Literal["access", "refresh"]
    username: str | None = None
    roles: list[str] = Field(default_factory=list)
    exp: datetime


class PasswordPolicyResponse(BaseModel):
    """Public description of the password policy."""

    min_length: int
    max_length: int
    require_uppercase: bool
    require_lowercase: bool
    require_digit: bool
    require_special_char: bool
    expiration_days: int
    warning_days: int

    model_config = _RESPONSE_CONFIG
