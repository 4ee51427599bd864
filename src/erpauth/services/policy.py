"""Password policy: expiry window and strength rules."""

import logging
import re
from dataclasses import dataclass

from erpauth.exceptions.errors import PasswordValidationError, PolicyMisconfigurationError
from erpauth.models.auth import PasswordPolicyResponse

logger = logging.getLogger(__name__)

UPPERCASE_PATTERN = re.compile(r"[A-Z]")
LOWERCASE_PATTERN = re.compile(r"[a-z]")
DIGIT_PATTERN = re.compile(r"[0-9]")
SPECIAL_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


@dataclass(frozen=True)
class PasswordPolicy:
    """Configured password rules.

    Invalid values raise ``PolicyMisconfigurationError`` on construction,
    so a bad configuration fails once at startup instead of on every
    login.

    Attributes
    ----------
    expiration_days : int
        Maximum password age in days; 0 disables expiry
    warning_days : int
        Days before expiry from which a password change is requested
    min_length : int
        Minimum password length
    max_length : int
        Maximum password length
    require_uppercase : bool
        Require at least one uppercase letter
    require_lowercase : bool
        Require at least one lowercase letter
    require_digit : bool
        Require at least one digit
    require_special_char : bool
        Require at least one special character
    """

    expiration_days: int
    warning_days: int
    min_length: int = 8
    max_length: int = 128
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_digit: bool = True
    require_special_char: bool = False

    def __post_init__(self) -> None:
        problems = []
        if self.expiration_days < 0:
            problems.append(f"expiration_days must be >= 0, got {self.expiration_days}")
        if self.warning_days < 0:
            problems.append(f"warning_days must be >= 0, got {self.warning_days}")
        if self.min_length < 1:
            problems.append(f"min_length must be >= 1, got {self.min_length}")
        if self.max_length < self.min_length:
            problems.append(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )
        if problems:
            raise PolicyMisconfigurationError("Invalid password policy: " + "; ".join(problems))

    @classmethod
    def from_settings(cls, settings) -> "PasswordPolicy":
        """Build the policy from application settings.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        PasswordPolicy
            Validated policy

        Raises
        ------
        PolicyMisconfigurationError
            If the configured values are invalid
        """
        policy = cls(
            expiration_days=settings.PASSWORD_EXPIRATION_DAYS,
            warning_days=settings.PASSWORD_WARNING_DAYS,
            min_length=settings.PASSWORD_MIN_LENGTH,
            max_length=settings.PASSWORD_MAX_LENGTH,
            require_uppercase=settings.PASSWORD_REQUIRE_UPPERCASE,
            require_lowercase=settings.PASSWORD_REQUIRE_LOWERCASE,
            require_digit=settings.PASSWORD_REQUIRE_DIGIT,
            require_special_char=settings.PASSWORD_REQUIRE_SPECIAL,
        )
        if policy.enabled and policy.warning_days >= policy.expiration_days:
            logger.warning(
                f"Password warning window ({policy.warning_days}d) covers the whole "
                f"expiration period ({policy.expiration_days}d)"
            )
        return policy

    @property
    def enabled(self) -> bool:
        """Whether password expiry is enforced."""
        return self.expiration_days > 0

    def validate_strength(self, password: str) -> list[str]:
        """Check a password against the strength rules.

        Parameters
        ----------
        password : str
            Candidate password

        Returns
        -------
        list[str]
            Violations found; empty when the password is acceptable
        """
        if not password:
            return ["Password must not be empty"]

        errors = []
        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters")
        if len(password) > self.max_length:
            errors.append(f"Password must be at most {self.max_length} characters")
        if self.require_uppercase and not UPPERCASE_PATTERN.search(password):
            errors.append("Password must contain an uppercase letter")
        if self.require_lowercase and not LOWERCASE_PATTERN.search(password):
            errors.append("Password must contain a lowercase letter")
        if self.require_digit and not DIGIT_PATTERN.search(password):
            errors.append("Password must contain a digit")
        if self.require_special_char and not SPECIAL_PATTERN.search(password):
            errors.append("Password must contain a special character")
        return errors

    def check_strength(self, password: str) -> None:
        """Raise ``PasswordValidationError`` if the password is too weak."""
        errors = self.validate_strength(password)
        if errors:
            raise PasswordValidationError("; ".join(errors))

    def to_response(self) -> PasswordPolicyResponse:
        """Return the client-facing description of this policy."""
        return PasswordPolicyResponse(
            min_length=self.min_length,
            max_length=self.max_length,
            require_uppercase=self.require_uppercase,
            require_lowercase=self.require_lowercase,
            require_digit=self.require_digit,
            require_special_char=self.require_special_char,
            expiration_days=self.expiration_days,
            warning_days=self.warning_days,
        )
