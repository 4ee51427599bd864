"""Configuration from environment variables."""

import os
from functools import lru_cache

_TRUE_VALUES = ("true", "1", "yes")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUE_VALUES


class Settings:
    """Authentication settings loaded from environment variables.

    Values are read when the instance is created, so tests and
    long-running processes can build a fresh ``Settings()`` after
    changing the environment.
    """

    def __init__(self) -> None:
        # JWT Configuration
        self.JWT_SECRET: str = os.getenv("ERP_JWT_SECRET", "CHANGE_ME_IN_PRODUCTION")
        self.JWT_ALGORITHM: str = os.getenv("ERP_JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRATION: int = int(os.getenv("ERP_JWT_EXPIRATION", "86400"))  # 24 hours
        self.JWT_REFRESH_EXPIRATION: int = int(
            os.getenv("ERP_JWT_REFRESH_EXPIRATION", "604800")
        )  # 7 days

        # Password policy (0 expiration days disables expiry)
        self.PASSWORD_EXPIRATION_DAYS: int = int(os.getenv("ERP_PASSWORD_EXPIRATION_DAYS", "90"))
        self.PASSWORD_WARNING_DAYS: int = int(os.getenv("ERP_PASSWORD_WARNING_DAYS", "14"))
        self.PASSWORD_MIN_LENGTH: int = int(os.getenv("ERP_PASSWORD_MIN_LENGTH", "8"))
        self.PASSWORD_MAX_LENGTH: int = int(os.getenv("ERP_PASSWORD_MAX_LENGTH", "128"))
        self.PASSWORD_REQUIRE_UPPERCASE: bool = _env_bool("ERP_PASSWORD_REQUIRE_UPPERCASE", "true")
        self.PASSWORD_REQUIRE_LOWERCASE: bool = _env_bool("ERP_PASSWORD_REQUIRE_LOWERCASE", "true")
        self.PASSWORD_REQUIRE_DIGIT: bool = _env_bool("ERP_PASSWORD_REQUIRE_DIGIT", "true")
        self.PASSWORD_REQUIRE_SPECIAL: bool = _env_bool("ERP_PASSWORD_REQUIRE_SPECIAL", "false")

        # Account lockout
        self.MAX_LOGIN_ATTEMPTS: int = int(os.getenv("ERP_MAX_LOGIN_ATTEMPTS", "5"))
        self.LOCK_DURATION_MINUTES: int = int(os.getenv("ERP_LOCK_DURATION_MINUTES", "30"))

        # Logging
        self.LOG_LEVEL: str = os.getenv("ERP_LOG_LEVEL", "WARNING").upper()

    def __repr__(self) -> str:
        """Return string representation of settings."""
        return (
            f"Settings(JWT_SECRET={'***' if self.JWT_SECRET != 'CHANGE_ME_IN_PRODUCTION' else 'DEFAULT'}, "
            f"JWT_ALGORITHM={self.JWT_ALGORITHM!r}, "
            f"PASSWORD_EXPIRATION_DAYS={self.PASSWORD_EXPIRATION_DAYS}, "
            f"PASSWORD_WARNING_DAYS={self.PASSWORD_WARNING_DAYS})"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns
    -------
    Settings
        Settings loaded from environment variables.

    Notes
    -----
    This function uses @lru_cache so only one Settings instance is
    created for the lifetime of the process.
    """
    return Settings()
