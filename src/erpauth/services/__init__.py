"""Authentication services."""

__all__ = [
    "AuthService",
    "CredentialVerifier",
    "InMemoryCredentialVerifier",
    "JwtTokenIssuer",
    "PasswordPolicy",
    "TokenIssuer",
    "assemble_login_result",
    "create_auth_service",
    "evaluate_password_status",
]

from erpauth.services.assembler import assemble_login_result, evaluate_password_status
from erpauth.services.auth import AuthService, create_auth_service
from erpauth.services.credentials import CredentialVerifier, InMemoryCredentialVerifier
from erpauth.services.policy import PasswordPolicy
from erpauth.services.tokens import JwtTokenIssuer, TokenIssuer
