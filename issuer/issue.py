from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional

from credcrypto.hashing import hash_credential
from credcrypto.keys import CryptoKeyPair
from credentials.model import (
    CredentialDraft,
    Evidence,
    Issuer,
    Microcredential,
    Skill,
    Subject,
)

def make_credential(
    issuer: Issuer,
    subject: Subject,
    skill: Skill,
    evidence: Iterable[Evidence] = (),
    expires_at: Optional[datetime] = None,
    metadata: Optional[Dict[str, str]] = None,
) -> CredentialDraft:
    return CredentialDraft(
        issuer=issuer,
        subject=subject,
        skill=skill,
        evidence=tuple(evidence),
        expires_at=expires_at,
        metadata=dict(metadata or {}),
    )

def credential_digest(credential) -> bytes:
    """SHA-256 over the canonical encoding, signature field excluded."""
    return hash_credential(credential.canonical_bytes())

def sign_credential(
    draft: CredentialDraft,
    keypair: CryptoKeyPair,
) -> Microcredential:
    digest = credential_digest(draft)
    signature = keypair.sign(digest)
    return draft.seal(signature)
