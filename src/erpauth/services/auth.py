"""Authentication service: login, token refresh and password changes."""

import logging
from datetime import datetime, timezone

from erpauth.config import Settings, get_settings
from erpauth.exceptions.errors import ERPAuthError
from erpauth.models.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResult,
    PasswordPolicyResponse,
)
from erpauth.services.assembler import assemble_login_result
from erpauth.services.credentials import CredentialVerifier, InMemoryCredentialVerifier
from erpauth.services.policy import PasswordPolicy
from erpauth.services.tokens import REFRESH, JwtTokenIssuer, TokenIssuer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """Runs the login flow: verify credentials, issue tokens, assemble.

    The service holds no mutable state itself; errors from the verifier
    or issuer propagate unchanged and no partial result is built.

    Parameters
    ----------
    verifier : CredentialVerifier
        Validates credentials and loads users
    issuer : TokenIssuer
        Mints and verifies tokens
    policy : PasswordPolicy
        Password policy in force
    clock : callable, optional
        Returns the current aware datetime, by default UTC now
    """

    def __init__(
        self,
        verifier: CredentialVerifier,
        issuer: TokenIssuer,
        policy: PasswordPolicy,
        clock=_utcnow,
    ):
        self.verifier = verifier
        self.issuer = issuer
        self.policy = policy
        self.clock = clock

    def login(self, credentials: LoginRequest) -> LoginResult:
        """Authenticate a user and build the login result.

        Parameters
        ----------
        credentials : LoginRequest
            Username and password

        Returns
        -------
        LoginResult
            Tokens, user summary and password expiry state

        Raises
        ------
        InvalidCredentialsError
            If the username or password is wrong
        AccountDisabledError
            If the account is disabled
        AccountLockedError
            If the account is locked
        """
        logger.debug(f"Login attempt for {credentials.username}")
        try:
            user = self.verifier.verify(credentials)
        except ERPAuthError as e:
            logger.warning(f"Login failed for {credentials.username}: {e}")
            raise

        tokens = self.issuer.issue(user)
        result = assemble_login_result(user, tokens, self.policy, self.clock().date())

        logger.info(f"User {user.username} logged in")
        if result.password_change_required:
            logger.info(
                f"User {user.username} must change password "
                f"(expired={result.password_expired}, "
                f"remaining_days={result.password_remaining_days})"
            )
        return result

    def refresh(self, refresh_token: str) -> LoginResult:
        """Exchange a refresh token for a new token pair.

        Raises
        ------
        InvalidTokenError
            If the refresh token is invalid, expired or an access token
        """
        token = self.issuer.verify(refresh_token, expected_type=REFRESH)
        user = self.verifier.get_user(token.user_id)
        tokens = self.issuer.issue(user)
        logger.info(f"Tokens refreshed for {user.username}")
        return assemble_login_result(user, tokens, self.policy, self.clock().date())

    def change_password(self, user_id: int, request: ChangePasswordRequest) -> None:
        """Change a user's password after checking it against the policy.

        Raises
        ------
        PasswordValidationError
            If the new password is too weak, equals the old one, or the old
            password is wrong
        """
        self.policy.check_strength(request.new_password)
        user = self.verifier.update_password(
            user_id, request.old_password, request.new_password, self.clock()
        )
        logger.info(f"User {user.username} changed password")

    def password_policy(self) -> PasswordPolicyResponse:
        return self.policy.to_response()


def create_auth_service(
    settings: Settings | None = None, verifier: CredentialVerifier | None = None
) -> AuthService:
    """Build an ``AuthService`` from settings.

    The password policy is validated here, so a misconfiguration fails at
    startup.

    Parameters
    ----------
    settings : Settings, optional
        Settings to use, by default ``get_settings()``
    verifier : CredentialVerifier, optional
        Credential verifier, by default an empty in-memory verifier

    Returns
    -------
    AuthService
        Configured service

    Raises
    ------
    PolicyMisconfigurationError
        If the password policy settings are invalid
    """
    settings = settings or get_settings()
    policy = PasswordPolicy.from_settings(settings)
    issuer = JwtTokenIssuer.from_settings(settings)
    if verifier is None:
        verifier = InMemoryCredentialVerifier.from_settings(settings)

    logger.info(
        f"Auth service ready (password expiration={policy.expiration_days}d, "
        f"warning={policy.warning_days}d)"
    )
    return AuthService(verifier=verifier, issuer=issuer, policy=policy)
