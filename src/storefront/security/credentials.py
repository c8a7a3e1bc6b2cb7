"""
Credential verification for LOGIN.

Stored user records hold a password hash computed by the client, and LOGIN
compares the supplied value with it directly. That is equality on a hash,
not a password hashing scheme; the comparison is at least done in constant
time so it does not leak how many leading characters matched.
"""

import hmac
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CredentialVerifier(Protocol):
    """Decides whether a supplied credential matches the stored one."""

    def verify(self, supplied: Optional[str], stored: Optional[str]) -> bool:
        ...


class ConstantTimeCredentialVerifier:
    """Exact match using a timing-safe comparison."""

    def verify(self, supplied: Optional[str], stored: Optional[str]) -> bool:
        if not supplied or not stored:
            return False
        return hmac.compare_digest(str(supplied).encode('utf-8'), str(stored).encode('utf-8'))
