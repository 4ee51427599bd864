"""Shared pytest fixtures for erpauth tests."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

TEST_SECRET = "test_secret_key_for_testing_only"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop the cached settings around every test.

    Yields
    ------
    None
        Control during the test
    """
    from erpauth.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today():
    """Fixed evaluation date.

    Returns
    -------
    date
        The date used as "today" across tests
    """
    return date(2026, 3, 1)


@pytest.fixture
def clock(today):
    """Clock returning noon UTC on the fixed test date.

    Parameters
    ----------
    today : date
        Fixed evaluation date

    Returns
    -------
    callable
        Zero-argument callable returning an aware datetime
    """
    return lambda: datetime.combine(today, time(12, 0), tzinfo=timezone.utc)


@pytest.fixture
def test_username():
    """Test username.

    Returns
    -------
    str
        Username for the default test user
    """
    return "admin"


@pytest.fixture
def test_password():
    """Test password satisfying the default policy.

    Returns
    -------
    str
        Password for the default test user
    """
    return "Passw0rd123"


@pytest.fixture
def policy():
    """Password policy with a 90 day expiry and 7 day warning window.

    Returns
    -------
    PasswordPolicy
        Test policy
    """
    from erpauth.services.policy import PasswordPolicy

    return PasswordPolicy(expiration_days=90, warning_days=7)


@pytest.fixture
def make_user(today, test_username):
    """Factory for verified users.

    Parameters
    ----------
    today : date
        Fixed evaluation date
    test_username : str
        Default username

    Returns
    -------
    callable
        ``make_user(days_ago=10, **overrides)`` returning AuthenticatedUser;
        ``days_ago=None`` means the password was never changed
    """
    from erpauth.models.auth import AuthenticatedUser

    def _make_user(days_ago=10, **overrides):
        changed_at = None
        if days_ago is not None:
            changed_at = datetime.combine(today, time(9, 30)) - timedelta(days=days_ago)
        fields = {
            "id": 1,
            "username": test_username,
            "name": "Administrator",
            "email": "admin@example.com",
            "role": "ADMIN",
            "role_name": "System Administrator",
            "password_changed_at": changed_at,
        }
        fields.update(overrides)
        return AuthenticatedUser(**fields)

    return _make_user


@pytest.fixture
def issued_tokens():
    """Static token pair for assembler tests.

    Returns
    -------
    IssuedTokens
        Tokens with a 24 hour lifetime
    """
    from erpauth.models.auth import IssuedTokens

    return IssuedTokens(access_token="access.token.value", refresh_token="refresh.token.value", expires_in=86400)


@pytest.fixture
def issuer():
    """JWT issuer signing with the test secret.

    Returns
    -------
    JwtTokenIssuer
        Issuer with default lifetimes
    """
    from erpauth.services.tokens import JwtTokenIssuer

    return JwtTokenIssuer(secret=TEST_SECRET)


class FakeTimer:
    """Manually advanced monotonic clock for TTL caches."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def timer():
    """Manually advanced timer.

    Returns
    -------
    FakeTimer
        Timer starting at zero
    """
    return FakeTimer()


@pytest.fixture
def verifier(make_user, test_password, timer):
    """In-memory verifier holding the default test user.

    Parameters
    ----------
    make_user : callable
        User factory
    test_password : str
        Password of the default user
    timer : FakeTimer
        Clock for the lockout caches

    Returns
    -------
    InMemoryCredentialVerifier
        Verifier locking after 3 failures for 30 minutes
    """
    from erpauth.services.credentials import InMemoryCredentialVerifier

    verifier = InMemoryCredentialVerifier(max_login_attempts=3, lock_duration_minutes=30, timer=timer)
    verifier.add_user(make_user(days_ago=85), test_password)
    return verifier


@pytest.fixture
def auth_service(verifier, issuer, policy, clock):
    """Auth service wired with test collaborators.

    Returns
    -------
    AuthService
        Service evaluated at noon UTC on the fixed test date
    """
    from erpauth.services.auth import AuthService

    return AuthService(verifier=verifier, issuer=issuer, policy=policy, clock=clock)


@pytest.fixture
def test_settings(monkeypatch):
    """Settings with test environment overrides.

    Parameters
    ----------
    monkeypatch : pytest.MonkeyPatch
        Pytest monkeypatch fixture

    Returns
    -------
    Settings
        Settings built from the patched environment
    """
    monkeypatch.setenv("ERP_JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("ERP_PASSWORD_EXPIRATION_DAYS", "90")
    monkeypatch.setenv("ERP_PASSWORD_WARNING_DAYS", "7")

    from erpauth.config import Settings

    return Settings()
