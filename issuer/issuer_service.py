from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional
from uuid import uuid4

from credcrypto.keys import CryptoKeyPair
from credentials.model import Evidence, Issuer, Microcredential, Skill, Subject
from issuer.issue import make_credential, sign_credential

logger = logging.getLogger(__name__)


class IssuerKeyMismatch(ValueError):
    """The secret key does not belong to the issuer identity it was paired with."""


class CredentialIssuer:
    """
    Issues signed microcredentials under a single issuer identity.

    Usage:
        issuer = CredentialIssuer("Test University", "https://test.edu")
        cred = issuer.issue_credential(subject, skill, evidence)
    """

    def __init__(self, name: str, url: str):
        keypair = CryptoKeyPair.generate()
        issuer_info = Issuer(
            id=uuid4(),
            name=name,
            url=url,
            public_key=keypair.public_key(),
        )
        self._init(issuer_info, keypair)
        logger.info("Created issuer %s (%s)", issuer_info.id, name)

    def _init(self, issuer_info: Issuer, keypair: CryptoKeyPair) -> None:
        self._issuer_info = issuer_info
        self._keypair = keypair

    @classmethod
    def from_existing(cls, issuer_info: Issuer, secret_key: bytes) -> CredentialIssuer:
        """
        Rebuild an issuer from a known identity and its 32-byte secret seed.

        Raises InvalidKeyLength / KeyDecodeError for malformed keys and
        IssuerKeyMismatch if the key's public half is not issuer_info.public_key.
        """
        keypair = CryptoKeyPair.from_secret_key(secret_key)
        if keypair.public_key() != bytes(issuer_info.public_key):
            raise IssuerKeyMismatch(
                f"Secret key does not match the public key recorded for issuer {issuer_info.id}"
            )
        service = cls.__new__(cls)
        service._init(issuer_info, keypair)
        logger.info("Loaded issuer %s (%s)", issuer_info.id, issuer_info.name)
        return service

    @property
    def issuer_info(self) -> Issuer:
        return self._issuer_info

    def get_issuer_info(self) -> Issuer:
        return self._issuer_info

    def get_public_key(self) -> bytes:
        return self._keypair.public_key()

    def get_secret_key(self) -> bytes:
        return self._keypair.secret_key()

    def issue_credential(
        self,
        subject: Subject,
        skill: Skill,
        evidence: Iterable[Evidence] = (),
        expires_at: Optional[datetime] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Microcredential:
        draft = make_credential(
            self._issuer_info,
            subject,
            skill,
            evidence,
            expires_at=expires_at,
            metadata=metadata,
        )
        credential = sign_credential(draft, self._keypair)
        logger.info(
            "Issued credential %s to subject %s for skill %s",
            credential.id, subject.id, skill.id,
        )
        return credential

    def __repr__(self) -> str:
        return f"CredentialIssuer(id={self._issuer_info.id}, name={self._issuer_info.name!r})"
