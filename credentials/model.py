"""
Microcredential data model.

A credential starts life as a mutable CredentialDraft and becomes an
immutable Microcredential once sealed with a signature. The signature is
computed over signing_payload(), which never contains the signature field.

Wire form (to_dict / from_dict):
    - UUIDs as strings
    - timestamps as ISO-8601 UTC with microseconds and a trailing "Z"
    - public_key / signature as unpadded base64url
"""

from __future__ import annotations

import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
from uuid import UUID, uuid4

from credcrypto.canonical import CanonicalizationError, canonicalize
from credcrypto.encoding import b64url_decode, b64url_encode
from credentials.timeutil import as_utc, from_iso, optional_iso, to_iso, utc_now


class CredentialEncodingError(ValueError):
    """Raised when a credential cannot be encoded or decoded."""


class SkillLevel(Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


@dataclass(frozen=True)
class EvidenceType:
    """Project, Assessment, Portfolio, Certification, or Other(free text)."""

    kind: str
    detail: Optional[str] = None

    KINDS = ("Project", "Assessment", "Portfolio", "Certification", "Other")

    def __post_init__(self):
        if self.kind not in self.KINDS:
            raise ValueError(f"Unknown evidence type: {self.kind!r}")
        if self.kind == "Other" and not isinstance(self.detail, str):
            raise ValueError("Other evidence type needs a text description")
        if self.kind != "Other" and self.detail is not None:
            raise ValueError(f"{self.kind} evidence type takes no description")

    @classmethod
    def other(cls, text: str) -> EvidenceType:
        return cls("Other", text)

    def to_wire(self) -> Any:
        if self.kind == "Other":
            return {"Other": self.detail}
        return self.kind

    @classmethod
    def from_wire(cls, value: Any) -> EvidenceType:
        if isinstance(value, dict):
            if list(value) != ["Other"]:
                raise ValueError(f"Unknown evidence type: {value!r}")
            return cls.other(value["Other"])
        return cls(value)


EvidenceType.PROJECT = EvidenceType("Project")
EvidenceType.ASSESSMENT = EvidenceType("Assessment")
EvidenceType.PORTFOLIO = EvidenceType("Portfolio")
EvidenceType.CERTIFICATION = EvidenceType("Certification")


@dataclass(frozen=True, eq=False)
class Issuer:
    """Issuing authority. Two identities are the same issuer iff their ids match."""

    id: UUID
    name: str
    url: str
    public_key: bytes

    def __eq__(self, other):
        if not isinstance(other, Issuer):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "url": self.url,
            "public_key": b64url_encode(self.public_key),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issuer:
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            url=data["url"],
            public_key=b64url_decode(data["public_key"]),
        )


@dataclass(frozen=True)
class Subject:
    id: UUID
    name: str
    email: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": str(self.id), "name": self.name, "email": self.email}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Subject:
        return cls(id=UUID(data["id"]), name=data["name"], email=data["email"])


@dataclass(frozen=True)
class Skill:
    id: str
    name: str
    description: str
    level: SkillLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "level": self.level.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Skill:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data["description"],
            level=SkillLevel(data["level"]),
        )


@dataclass(frozen=True)
class Evidence:
    id: UUID
    name: str
    description: str
    url: str
    evidence_type: EvidenceType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "evidence_type": self.evidence_type.to_wire(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Evidence:
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            description=data["description"],
            url=data["url"],
            evidence_type=EvidenceType.from_wire(data["evidence_type"]),
        )


def _check_metadata(key: Any, value: Any) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise TypeError("metadata keys and values must be strings")


def _payload(cred) -> Dict[str, Any]:
    """Wire dict of every signed field (everything except the signature)."""
    return {
        "id": str(cred.id),
        "issuer": cred.issuer.to_dict(),
        "subject": cred.subject.to_dict(),
        "skill": cred.skill.to_dict(),
        "evidence": [e.to_dict() for e in cred.evidence],
        "issued_at": to_iso(cred.issued_at),
        "expires_at": optional_iso(cred.expires_at),
        "metadata": dict(cred.metadata),
    }


def _canonical_bytes(cred) -> bytes:
    try:
        return canonicalize(_payload(cred))
    except CanonicalizationError as e:
        raise CredentialEncodingError(str(e)) from e


@dataclass
class CredentialDraft:
    """
    Unsigned, still-mutable credential.

    id and issued_at are fixed when the draft is created; metadata may be
    added until the draft is sealed.
    """

    issuer: Issuer
    subject: Subject
    skill: Skill
    evidence: Tuple[Evidence, ...] = ()
    expires_at: Optional[datetime] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    issued_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.evidence = tuple(self.evidence)
        self.issued_at = as_utc(self.issued_at)
        if self.expires_at is not None:
            self.expires_at = as_utc(self.expires_at)
        for k, v in self.metadata.items():
            _check_metadata(k, v)
        self.metadata = dict(self.metadata)

    def add_metadata(self, key: str, value: str) -> None:
        _check_metadata(key, value)
        self.metadata[key] = value

    def signing_payload(self) -> Dict[str, Any]:
        return _payload(self)

    def canonical_bytes(self) -> bytes:
        return _canonical_bytes(self)

    def seal(self, signature: Optional[bytes]) -> Microcredential:
        return Microcredential(
            id=self.id,
            issuer=self.issuer,
            subject=self.subject,
            skill=self.skill,
            evidence=self.evidence,
            issued_at=self.issued_at,
            expires_at=self.expires_at,
            metadata=self.metadata,
            signature=signature,
        )


@dataclass(frozen=True)
class Microcredential:
    """Sealed credential. Immutable; use to_draft() to derive a changed copy."""

    id: UUID
    issuer: Issuer
    subject: Subject
    skill: Skill
    evidence: Tuple[Evidence, ...]
    issued_at: datetime
    expires_at: Optional[datetime] = None
    metadata: Mapping[str, str] = field(default_factory=dict, hash=False)
    signature: Optional[bytes] = None

    def __post_init__(self):
        for k, v in self.metadata.items():
            _check_metadata(k, v)
        object.__setattr__(self, "evidence", tuple(self.evidence))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        object.__setattr__(self, "issued_at", as_utc(self.issued_at))
        if self.expires_at is not None:
            object.__setattr__(self, "expires_at", as_utc(self.expires_at))
        if self.signature is not None:
            object.__setattr__(self, "signature", bytes(self.signature))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = utc_now() if now is None else as_utc(now)
        return now > self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return self.signature is not None and not self.is_expired(now)

    def signing_payload(self) -> Dict[str, Any]:
        return _payload(self)

    def canonical_bytes(self) -> bytes:
        return _canonical_bytes(self)

    def to_draft(self) -> CredentialDraft:
        """Unsigned copy with the same id and issued_at. The signature is dropped."""
        return CredentialDraft(
            issuer=self.issuer,
            subject=self.subject,
            skill=self.skill,
            evidence=self.evidence,
            expires_at=self.expires_at,
            metadata=dict(self.metadata),
            id=self.id,
            issued_at=self.issued_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _payload(self)
        data["signature"] = None if self.signature is None else b64url_encode(self.signature)
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Microcredential:
        try:
            sig = data.get("signature")
            expires_at = data.get("expires_at")
            return cls(
                id=UUID(data["id"]),
                issuer=Issuer.from_dict(data["issuer"]),
                subject=Subject.from_dict(data["subject"]),
                skill=Skill.from_dict(data["skill"]),
                evidence=tuple(Evidence.from_dict(e) for e in data.get("evidence", [])),
                issued_at=from_iso(data["issued_at"]),
                expires_at=None if expires_at is None else from_iso(expires_at),
                metadata=dict(data.get("metadata") or {}),
                signature=None if sig is None else b64url_decode(sig),
            )
        except (KeyError, TypeError, ValueError, AttributeError, binascii.Error) as e:
            raise CredentialEncodingError(f"Malformed credential document: {e}") from e

    @classmethod
    def from_json(cls, text: str) -> Microcredential:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CredentialEncodingError(f"Malformed credential document: {e}") from e
        if not isinstance(data, dict):
            raise CredentialEncodingError("Credential document must be a JSON object")
        return cls.from_dict(data)


def new_evidence(name: str, description: str, url: str, evidence_type: EvidenceType) -> Evidence:
    return Evidence(id=uuid4(), name=name, description=description, url=url, evidence_type=evidence_type)
