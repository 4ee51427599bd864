"""ERP authentication and password-lifecycle response shaping.

Verifies credentials, issues JWT access/refresh tokens and assembles the
login result, including password expiry warnings driven by the configured
password policy.

Usage:
    from erpauth import LoginRequest, create_auth_service

    service = create_auth_service()
    result = service.login(LoginRequest(username="admin", password="..."))
    body = result.model_dump(by_alias=True)
"""

__all__ = [
    "AuthService",
    "LoginRequest",
    "LoginResult",
    "PasswordPolicy",
    "assemble_login_result",
    "create_auth_service",
    "evaluate_password_status",
]

from erpauth.models.auth import LoginRequest, LoginResult
from erpauth.services.assembler import assemble_login_result, evaluate_password_status
from erpauth.services.auth import AuthService, create_auth_service
from erpauth.services.policy import PasswordPolicy
