"""
Verification failures.

Every reason a credential is rejected is its own exception type so callers
can branch on it. All of them are terminal: retrying will not change the
answer.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID


class VerificationError(Exception):
    """Base class for all verification failures."""

    message = "Verification failed"

    def __init__(self, detail: Optional[str] = None, credential_id: Optional[UUID] = None):
        self.detail = detail
        self.credential_id = credential_id
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class SerializationError(VerificationError):
    message = "Serialization error"


class InvalidSignature(VerificationError):
    message = "Invalid signature"


class ExpiredCredential(VerificationError):
    message = "Credential has expired"


class MissingSignature(VerificationError):
    message = "Credential is not signed"


class TrustedIssuerNotFound(VerificationError):
    message = "Issuer is not in the trusted list"
