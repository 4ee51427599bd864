"""Login result assembly.

Turns a verified user, freshly issued tokens and the password policy into
the ``LoginResult`` returned to the client. Everything here is pure: the
current date is passed in, nothing is read from a clock, a database or
shared state, so the functions are safe to call from any number of
concurrent request handlers.
"""

from datetime import date

from erpauth.models.auth import (
    AuthenticatedUser,
    IssuedTokens,
    LoginResult,
    PasswordStatus,
    UserSummary,
)
from erpauth.services.policy import PasswordPolicy

NOT_APPLICABLE = -1


def password_age_days(user: AuthenticatedUser, today: date) -> int | None:
    """Return how many whole days ago the user's password was changed.

    Parameters
    ----------
    user : AuthenticatedUser
        Verified user
    today : date
        Current date

    Returns
    -------
    int | None
        Age in days, or None if the password was never changed
    """
    if user.password_age_days is not None:
        return user.password_age_days
    if user.password_changed_at is None:
        return None
    # a change timestamp in the future counts as changed today
    return max((today - user.password_changed_at.date()).days, 0)


def evaluate_password_status(
    user: AuthenticatedUser, policy: PasswordPolicy, today: date
) -> PasswordStatus:
    """Compute the password expiry state of a user.

    Parameters
    ----------
    user : AuthenticatedUser
        Verified user
    policy : PasswordPolicy
        Password policy in force
    today : date
        Current date

    Returns
    -------
    PasswordStatus
        ``remaining_days`` is -1 when the policy does not apply and 0 once
        the password has expired, so -1 never means "expired a day ago".

    Notes
    -----
    A password that was never changed counts as expired today.
    """
    if not policy.enabled or user.password_policy_exempt:
        return PasswordStatus(remaining_days=NOT_APPLICABLE, expired=False, change_required=False)

    age = password_age_days(user, today)
    remaining = policy.expiration_days - age if age is not None else 0

    expired = remaining <= 0
    return PasswordStatus(
        remaining_days=max(remaining, 0),
        expired=expired,
        change_required=expired or remaining <= policy.warning_days,
    )


def assemble_login_result(
    user: AuthenticatedUser,
    tokens: IssuedTokens,
    policy: PasswordPolicy,
    today: date,
) -> LoginResult:
    """Build the login result for a verified user.

    Parameters
    ----------
    user : AuthenticatedUser
        User returned by the credential verifier
    tokens : IssuedTokens
        Tokens minted for this user
    policy : PasswordPolicy
        Password policy in force
    today : date
        Current date

    Returns
    -------
    LoginResult
        Immutable login result
    """
    status = evaluate_password_status(user, policy, today)

    return LoginResult(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type="Bearer",
        expires_in=tokens.expires_in,
        user=UserSummary.from_user(user),
        password_expired=status.expired,
        password_remaining_days=status.remaining_days,
        password_change_required=status.change_required,
    )
