"""Credential verification and account lockout."""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from cachetools import TTLCache
from passlib.context import CryptContext

from erpauth.exceptions.errors import (
    AccountDisabledError,
    AccountLockedError,
    InvalidCredentialsError,
    PasswordValidationError,
)
from erpauth.models.auth import AuthenticatedUser, LoginRequest

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password.

    Parameters
    ----------
    password : str
        Plain text password

    Returns
    -------
    str
        PBKDF2-SHA256 hash in modular crypt format
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class CredentialVerifier(Protocol):
    """Validates credentials and looks up verified users."""

    def verify(self, credentials: LoginRequest) -> AuthenticatedUser: ...

    def get_user(self, user_id: int) -> AuthenticatedUser: ...

    def update_password(
        self, user_id: int, old_password: str, new_password: str, changed_at: datetime
    ) -> AuthenticatedUser: ...


class LoginAttemptTracker:
    """Counts failed logins per username and locks after too many.

    Both the failure counters and the locks live in ``TTLCache`` instances
    whose TTL is the lock duration, so a lock lifts by itself and an idle
    failure counter is forgotten after the same period.

    Parameters
    ----------
    max_attempts : int
        Failures that trigger a lock
    lock_duration : int
        Lock duration in seconds
    timer : callable, optional
        Monotonic clock used by the caches, by default ``time.monotonic``
    """

    def __init__(self, max_attempts: int = 5, lock_duration: int = 1800, timer=time.monotonic):
        self.max_attempts = max_attempts
        self.lock_duration = lock_duration
        self._failures = TTLCache(maxsize=10000, ttl=lock_duration, timer=timer)
        self._locked = TTLCache(maxsize=10000, ttl=lock_duration, timer=timer)
        self._lock = threading.Lock()

    def is_locked(self, username: str) -> bool:
        with self._lock:
            return username in self._locked

    def failures(self, username: str) -> int:
        with self._lock:
            return self._failures.get(username, 0)

    def record_failure(self, username: str) -> bool:
        """Record a failed attempt.

        Returns
        -------
        bool
            True if this failure locked the account
        """
        with self._lock:
            count = self._failures.get(username, 0) + 1
            if count >= self.max_attempts:
                self._failures.pop(username, None)
                self._locked[username] = True
                return True
            self._failures[username] = count
            return False

    def reset(self, username: str) -> None:
        with self._lock:
            self._failures.pop(username, None)
            self._locked.pop(username, None)


@dataclass
class _UserRecord:
    user: AuthenticatedUser
    password_hash: str
    active: bool = True


class InMemoryCredentialVerifier:
    """Credential verifier backed by an in-process user table.

    Parameters
    ----------
    max_login_attempts : int, optional
        Failed logins before the account is locked, by default 5
    lock_duration_minutes : int, optional
        How long a lock lasts, by default 30
    timer : callable, optional
        Clock for the lockout caches, by default ``time.monotonic``
    """

    def __init__(self, max_login_attempts: int = 5, lock_duration_minutes: int = 30, timer=time.monotonic):
        self.attempts = LoginAttemptTracker(
            max_attempts=max_login_attempts,
            lock_duration=lock_duration_minutes * 60,
            timer=timer,
        )
        self.lock_duration_minutes = lock_duration_minutes
        self._users: dict[str, _UserRecord] = {}
        self._ids: dict[int, str] = {}

    @classmethod
    def from_settings(cls, settings) -> "InMemoryCredentialVerifier":
        """Create a verifier using the lockout settings."""
        return cls(
            max_login_attempts=settings.MAX_LOGIN_ATTEMPTS,
            lock_duration_minutes=settings.LOCK_DURATION_MINUTES,
        )

    def add_user(self, user: AuthenticatedUser, password: str, active: bool = True) -> None:
        """Register a user with a plain text password (stored hashed).

        Registering an existing username or ID replaces that user.
        """
        previous = self._users.get(user.username)
        if previous is not None:
            self._ids.pop(previous.user.id, None)
        stale = self._ids.get(user.id)
        if stale is not None and stale != user.username:
            del self._users[stale]
        self._users[user.username] = _UserRecord(
            user=user, password_hash=get_password_hash(password), active=active
        )
        self._ids[user.id] = user.username

    def set_active(self, username: str, active: bool) -> None:
        self._users[username].active = active

    def verify(self, credentials: LoginRequest) -> AuthenticatedUser:
        """Validate a username and password.

        Parameters
        ----------
        credentials : LoginRequest
            Username and password

        Returns
        -------
        AuthenticatedUser
            The verified user

        Raises
        ------
        InvalidCredentialsError
            If the user is unknown or the password is wrong
        AccountDisabledError
            If the account is disabled
        AccountLockedError
            If the account is locked after too many failures
        """
        record = self._users.get(credentials.username)
        if record is None:
            raise InvalidCredentialsError("Invalid username or password")

        if not record.active:
            raise AccountDisabledError("Account is disabled, contact an administrator")

        if self.attempts.is_locked(credentials.username):
            raise AccountLockedError("Account is locked, try again later")

        if not verify_password(credentials.password, record.password_hash):
            if self.attempts.record_failure(credentials.username):
                logger.warning(
                    f"User {credentials.username} locked for {self.lock_duration_minutes} "
                    "minutes after too many failed logins"
                )
            raise InvalidCredentialsError("Invalid username or password")

        self.attempts.reset(credentials.username)
        return record.user

    def get_user(self, user_id: int) -> AuthenticatedUser:
        """Look up an active user by ID.

        Raises
        ------
        InvalidCredentialsError
            If no such user exists
        AccountDisabledError
            If the account is disabled
        """
        username = self._ids.get(user_id)
        if username is None:
            raise InvalidCredentialsError("User does not exist")
        record = self._users[username]
        if not record.active:
            raise AccountDisabledError("Account is disabled")
        return record.user

    def update_password(
        self, user_id: int, old_password: str, new_password: str, changed_at: datetime
    ) -> AuthenticatedUser:
        """Replace a user's password.

        Parameters
        ----------
        user_id : int
            User ID
        old_password : str
            Current password
        new_password : str
            Replacement password
        changed_at : datetime
            Time of the change

        Returns
        -------
        AuthenticatedUser
            The user with the new ``password_changed_at``

        Raises
        ------
        PasswordValidationError
            If the old password is wrong or the new one equals it
        """
        user = self.get_user(user_id)
        record = self._users[user.username]

        if not verify_password(old_password, record.password_hash):
            raise PasswordValidationError("Current password is incorrect")
        if verify_password(new_password, record.password_hash):
            raise PasswordValidationError("New password must differ from the current password")

        record.password_hash = get_password_hash(new_password)
        record.user = user.model_copy(
            update={"password_changed_at": changed_at, "password_age_days": None}
        )
        return record.user
