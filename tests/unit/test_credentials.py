"""Unit tests for credential verification and account lockout."""

from datetime import datetime, timezone

import pytest

from erpauth.config import Settings
from erpauth.exceptions.errors import (
    AccountDisabledError,
    AccountLockedError,
    InvalidCredentialsError,
    PasswordValidationError,
)
from erpauth.models.auth import LoginRequest
from erpauth.services.credentials import (
    InMemoryCredentialVerifier,
    LoginAttemptTracker,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing."""

    def test_hash_password(self):
        """Hashes are not the plain password."""
        hashed = get_password_hash("test_pass")

        assert hashed != "test_pass"
        assert hashed.startswith("$pbkdf2-sha256$")

    def test_verify_password_correct(self):
        """The right password verifies."""
        hashed = get_password_hash("correct_pass")
        assert verify_password("correct_pass", hashed) is True

    def test_verify_password_incorrect(self):
        """The wrong password does not verify."""
        hashed = get_password_hash("correct_pass")
        assert verify_password("wrong_pass", hashed) is False

    def test_hashes_are_salted(self):
        """Hashing twice gives different hashes."""
        assert get_password_hash("same") != get_password_hash("same")


class TestLoginAttemptTracker:
    """Tests for failed login counting."""

    def test_locks_at_max_attempts(self, timer):
        """The failure that reaches the limit locks the account."""
        tracker = LoginAttemptTracker(max_attempts=3, lock_duration=60, timer=timer)

        assert tracker.record_failure("bob") is False
        assert tracker.record_failure("bob") is False
        assert tracker.failures("bob") == 2
        assert tracker.record_failure("bob") is True
        assert tracker.is_locked("bob") is True

    def test_lock_expires(self, timer):
        """Locks lift after the lock duration."""
        tracker = LoginAttemptTracker(max_attempts=1, lock_duration=60, timer=timer)
        tracker.record_failure("bob")

        timer.advance(59)
        assert tracker.is_locked("bob") is True
        timer.advance(2)
        assert tracker.is_locked("bob") is False

    def test_reset_clears_state(self, timer):
        """Reset forgets failures and locks."""
        tracker = LoginAttemptTracker(max_attempts=2, lock_duration=60, timer=timer)
        tracker.record_failure("bob")
        tracker.reset("bob")

        assert tracker.failures("bob") == 0
        assert tracker.is_locked("bob") is False

    def test_users_tracked_separately(self, timer):
        """One user's failures do not affect another."""
        tracker = LoginAttemptTracker(max_attempts=1, lock_duration=60, timer=timer)
        tracker.record_failure("bob")

        assert tracker.is_locked("alice") is False


class TestVerify:
    """Tests for InMemoryCredentialVerifier.verify."""

    def test_valid_credentials(self, verifier, test_username, test_password):
        """Correct credentials return the stored user."""
        user = verifier.verify(LoginRequest(username=test_username, password=test_password))

        assert user.username == test_username
        assert user.id == 1

    def test_unknown_user(self, verifier, test_password):
        """Unknown usernames are invalid credentials."""
        with pytest.raises(InvalidCredentialsError) as exc_info:
            verifier.verify(LoginRequest(username="ghost", password=test_password))

        assert exc_info.value.status_code == 401

    def test_wrong_password(self, verifier, test_username):
        """A wrong password is invalid credentials."""
        with pytest.raises(InvalidCredentialsError):
            verifier.verify(LoginRequest(username=test_username, password="wrong"))

    def test_disabled_account(self, verifier, test_username, test_password):
        """Disabled accounts cannot log in even with the right password."""
        verifier.set_active(test_username, False)

        with pytest.raises(AccountDisabledError) as exc_info:
            verifier.verify(LoginRequest(username=test_username, password=test_password))

        assert exc_info.value.status_code == 403

    def test_lockout_after_failures(self, verifier, test_username, test_password):
        """The account locks after three failures, even for the right password."""
        wrong = LoginRequest(username=test_username, password="wrong")
        for _ in range(3):
            with pytest.raises(InvalidCredentialsError):
                verifier.verify(wrong)

        with pytest.raises(AccountLockedError) as exc_info:
            verifier.verify(LoginRequest(username=test_username, password=test_password))

        assert exc_info.value.error_code == "ACCOUNT_LOCKED"

    def test_lock_lifts_after_duration(self, verifier, timer, test_username, test_password):
        """After the lock duration the user can log in again."""
        wrong = LoginRequest(username=test_username, password="wrong")
        for _ in range(3):
            with pytest.raises(InvalidCredentialsError):
                verifier.verify(wrong)

        timer.advance(30 * 60 + 1)

        user = verifier.verify(LoginRequest(username=test_username, password=test_password))
        assert user.username == test_username

    def test_success_resets_failures(self, verifier, test_username, test_password):
        """A successful login clears the failure count."""
        wrong = LoginRequest(username=test_username, password="wrong")
        for _ in range(2):
            with pytest.raises(InvalidCredentialsError):
                verifier.verify(wrong)

        verifier.verify(LoginRequest(username=test_username, password=test_password))

        assert verifier.attempts.failures(test_username) == 0

    def test_from_settings(self, monkeypatch):
        """Lockout settings come from the environment."""
        monkeypatch.setenv("ERP_MAX_LOGIN_ATTEMPTS", "10")
        monkeypatch.setenv("ERP_LOCK_DURATION_MINUTES", "15")

        verifier = InMemoryCredentialVerifier.from_settings(Settings())

        assert verifier.attempts.max_attempts == 10
        assert verifier.attempts.lock_duration == 15 * 60


class TestAddUser:
    """Tests for registering users."""

    def test_readding_username_with_new_id(self, verifier, make_user, test_username):
        """The old ID no longer resolves once the username moves to a new ID."""
        verifier.add_user(make_user(id=7), "Another1pass")

        assert verifier.get_user(7).username == test_username
        with pytest.raises(InvalidCredentialsError):
            verifier.get_user(1)

    def test_reusing_id_replaces_user(self, verifier, make_user, test_username, test_password):
        """Giving an ID to another username removes the previous holder."""
        verifier.add_user(make_user(username="clerk"), "Clerk1pass")

        assert verifier.get_user(1).username == "clerk"
        with pytest.raises(InvalidCredentialsError):
            verifier.verify(LoginRequest(username=test_username, password=test_password))


class TestGetUser:
    """Tests for looking users up by ID."""

    def test_get_user(self, verifier):
        """Known IDs return the user."""
        assert verifier.get_user(1).username == "admin"

    def test_unknown_user(self, verifier):
        """Unknown IDs raise."""
        with pytest.raises(InvalidCredentialsError):
            verifier.get_user(999)

    def test_disabled_user(self, verifier, test_username):
        """Disabled users cannot be loaded."""
        verifier.set_active(test_username, False)

        with pytest.raises(AccountDisabledError):
            verifier.get_user(1)


class TestUpdatePassword:
    """Tests for password changes."""

    def test_update_password(self, verifier, test_username, test_password):
        """The new password works and the change time is recorded."""
        changed_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

        user = verifier.update_password(1, test_password, "NewPassw0rd", changed_at)

        assert user.password_changed_at == changed_at
        assert user.password_age_days is None
        assert verifier.verify(LoginRequest(username=test_username, password="NewPassw0rd")).id == 1
        with pytest.raises(InvalidCredentialsError):
            verifier.verify(LoginRequest(username=test_username, password=test_password))

    def test_wrong_old_password(self, verifier):
        """The current password must be supplied."""
        with pytest.raises(PasswordValidationError):
            verifier.update_password(1, "wrong", "NewPassw0rd", datetime.now(timezone.utc))

    def test_same_password_rejected(self, verifier, test_password):
        """The new password must differ from the old one."""
        with pytest.raises(PasswordValidationError) as exc_info:
            verifier.update_password(1, test_password, test_password, datetime.now(timezone.utc))

        assert "differ" in str(exc_info.value)
