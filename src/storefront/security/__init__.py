"""
Security Module.

Bearer token issuing/verification and LOGIN credential comparison.
"""

from storefront.security.credentials import ConstantTimeCredentialVerifier, CredentialVerifier
from storefront.security.tokens import DEVELOPMENT_SECRET, TokenService

__all__ = [
    "ConstantTimeCredentialVerifier",
    "CredentialVerifier",
    "DEVELOPMENT_SECRET",
    "TokenService",
]
