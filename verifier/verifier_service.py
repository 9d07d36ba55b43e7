"""
Credential verifier.

Checks run in a fixed order and stop at the first failure:
  1. not expired                      -> ExpiredCredential
  2. signature present                -> MissingSignature
  3. issuer id in the trust store     -> TrustedIssuerNotFound
  4. signature over the SHA-256 digest of the canonical encoding
     (signature field excluded), checked against the TRUST STORE's
     public key, never the one embedded in the credential
                                      -> SerializationError / InvalidSignature
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from credcrypto.hashing import hash_credential
from credcrypto.keys import CryptoError
from credcrypto.signing import verify_signature
from credentials.model import CredentialEncodingError, Issuer, Microcredential
from verifier.errors import (
    ExpiredCredential,
    InvalidSignature,
    MissingSignature,
    SerializationError,
    TrustedIssuerNotFound,
    VerificationError,
)
from verifier.trust_store import TrustStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationOutcome:
    """Result for one credential in a batch."""
    credential_id: UUID
    error: Optional[VerificationError] = None

    @property
    def valid(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class CredentialVerifier:
    """
    Verifies microcredentials against a set of trusted issuers.

    Usage:
        verifier = CredentialVerifier()
        verifier.add_trusted_issuer(issuer.get_issuer_info())
        verifier.verify_credential(cred)   # True, or raises VerificationError
    """

    def __init__(self, trusted_issuers: Iterable[Issuer] = ()):
        self._trust_store = TrustStore(trusted_issuers)

    @property
    def trust_store(self) -> TrustStore:
        return self._trust_store

    def add_trusted_issuer(self, issuer: Issuer) -> None:
        self._trust_store.add(issuer)
        logger.info("Trusting issuer %s (%s)", issuer.id, issuer.name)

    def remove_trusted_issuer(self, issuer_id: UUID) -> bool:
        removed = self._trust_store.remove(issuer_id)
        if removed:
            logger.info("Removed trusted issuer %s", issuer_id)
        return removed

    def get_trusted_issuers(self) -> Tuple[Issuer, ...]:
        return self._trust_store.snapshot()

    def verify_credential(self, credential: Microcredential, now: Optional[datetime] = None) -> bool:
        """
        Verify one credential.

        Returns True on success. Every failure is raised as a
        VerificationError subclass; this never returns False.
        """
        try:
            self._check(credential, now)
        except VerificationError as e:
            logger.warning("Rejected credential %s: %s", credential.id, e)
            raise
        logger.debug("Accepted credential %s from issuer %s", credential.id, credential.issuer.id)
        return True

    def _check(self, credential: Microcredential, now: Optional[datetime]) -> None:
        if credential.is_expired(now):
            raise ExpiredCredential(credential_id=credential.id)

        signature = credential.signature
        if signature is None:
            raise MissingSignature(credential_id=credential.id)

        trusted = self._trust_store.get(credential.issuer.id)
        if trusted is None:
            raise TrustedIssuerNotFound(str(credential.issuer.id), credential_id=credential.id)

        try:
            encoded = credential.canonical_bytes()
        except CredentialEncodingError as e:
            raise SerializationError(str(e), credential_id=credential.id) from e

        digest = hash_credential(encoded)
        try:
            ok = verify_signature(trusted.public_key, digest, signature)
        except CryptoError as e:
            raise InvalidSignature(str(e), credential_id=credential.id) from e
        if not ok:
            raise InvalidSignature(credential_id=credential.id)

    def verify_credential_chain(
        self,
        credentials: Iterable[Microcredential],
        fail_fast: bool = False,
        now: Optional[datetime] = None,
    ) -> List[VerificationOutcome]:
        """
        Verify a batch, one outcome per credential in input order.

        With fail_fast=True the first failure is raised instead and the
        remaining credentials are not checked.
        """
        outcomes = []
        for credential in credentials:
            try:
                self.verify_credential(credential, now)
            except VerificationError as e:
                if fail_fast:
                    raise
                outcomes.append(VerificationOutcome(credential.id, e))
            else:
                outcomes.append(VerificationOutcome(credential.id))
        return outcomes
