"""JWT token issuing and verification."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Protocol

from jose import JWTError, jwt

from erpauth.exceptions.errors import InvalidTokenError
from erpauth.models.auth import AuthenticatedUser, IssuedTokens, TokenData

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenIssuer(Protocol):
    """Mints tokens for a verified user and reads them back."""

    def issue(self, user: AuthenticatedUser) -> IssuedTokens: ...

    def verify(self, token: str, expected_type: str = ACCESS) -> TokenData: ...


class JwtTokenIssuer:
    """HMAC-signed JWT issuer.

    Parameters
    ----------
    secret : str
        Signing secret
    algorithm : str, optional
        JWT algorithm, by default "HS256"
    expiration : int, optional
        Access token lifetime in seconds, by default 86400 (24 hours)
    refresh_expiration : int, optional
        Refresh token lifetime in seconds, by default 604800 (7 days)
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiration: int = 86400,
        refresh_expiration: int = 604800,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        if expiration <= 0 or refresh_expiration <= 0:
            raise ValueError("JWT token lifetimes must be positive")
        self.secret = secret
        self.algorithm = algorithm
        self.expiration = expiration
        self.refresh_expiration = refresh_expiration

    @classmethod
    def from_settings(cls, settings) -> "JwtTokenIssuer":
        """Create an issuer from application settings."""
        if settings.JWT_SECRET == "CHANGE_ME_IN_PRODUCTION":
            logger.warning("Using the default JWT secret; set ERP_JWT_SECRET in production")
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expiration=settings.JWT_EXPIRATION,
            refresh_expiration=settings.JWT_REFRESH_EXPIRATION,
        )

    def create_access_token(self, user: AuthenticatedUser) -> str:
        """Create a signed access token.

        The token carries the user ID as ``sub`` plus username, display
        name and role so downstream services can authorize without a
        lookup.
        """
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "name": user.name,
            "roles": [user.role],
            "type": ACCESS,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiration),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def create_refresh_token(self, user: AuthenticatedUser) -> str:
        """Create a signed refresh token carrying only the user ID."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "type": REFRESH,
            "iat": now,
            "exp": now + timedelta(seconds=self.refresh_expiration),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def issue(self, user: AuthenticatedUser) -> IssuedTokens:
        """Mint an access/refresh token pair for a verified user.

        Parameters
        ----------
        user : AuthenticatedUser
            Verified user

        Returns
        -------
        IssuedTokens
            Tokens and access token lifetime in seconds
        """
        return IssuedTokens(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user),
            expires_in=self.expiration,
        )

    def verify(self, token: str, expected_type: str = ACCESS) -> TokenData:
        """Verify a token and extract its data.

        Parameters
        ----------
        token : str
            Encoded JWT
        expected_type : str, optional
            Required ``type`` claim, by default "access"

        Returns
        -------
        TokenData
            Extracted token data

        Raises
        ------
        InvalidTokenError
            If the token is malformed, expired, badly signed, missing its
            subject or of the wrong type
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError(f"Invalid token: {e!s}") from e

        subject = payload.get("sub")
        token_type = payload.get("type")
        if not subject or not subject.isdigit() or "exp" not in payload:
            raise InvalidTokenError("Invalid token: missing required fields")
        if token_type != expected_type:
            raise InvalidTokenError(f"Invalid token: expected {expected_type} token")

        return TokenData(
            user_id=int(subject),
            token_type=token_type,
            username=payload.get("username"),
            roles=payload.get("roles") or [],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
