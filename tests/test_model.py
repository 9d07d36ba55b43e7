"""
Tests for the credential data model: expiry, drafts vs sealed credentials,
the signed payload and the JSON wire document.
"""

import dataclasses
import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from credentials.model import (
    CredentialDraft,
    CredentialEncodingError,
    Evidence,
    EvidenceType,
    Issuer,
    Microcredential,
    SkillLevel,
)
from credentials.timeutil import from_iso, to_iso


NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _draft(issuer_service, subject, skill, evidence, **kwargs):
    return CredentialDraft(
        issuer=issuer_service.get_issuer_info(),
        subject=subject,
        skill=skill,
        evidence=evidence,
        **kwargs,
    )


class TestExpiry:

    def test_no_expiry_never_expires(self, credential):
        assert credential.expires_at is None
        assert credential.is_expired(NOW + timedelta(days=365 * 100)) is False

    def test_expired_strictly_after(self, issuer_service, subject, skill, evidence):
        cred = _draft(issuer_service, subject, skill, evidence, expires_at=NOW).seal(b"\x00" * 64)
        assert cred.is_expired(NOW) is False
        assert cred.is_expired(NOW + timedelta(microseconds=1)) is True

    def test_is_valid_requires_signature(self, issuer_service, subject, skill, evidence):
        unsigned = _draft(issuer_service, subject, skill, evidence).seal(None)
        assert unsigned.is_valid() is False

    def test_is_valid_false_when_expired(self, issuer_service, subject, skill, evidence):
        cred = _draft(issuer_service, subject, skill, evidence, expires_at=NOW).seal(b"\x00" * 64)
        assert cred.is_valid(NOW) is True
        assert cred.is_valid(NOW + timedelta(seconds=1)) is False

    def test_naive_datetimes_are_utc(self, issuer_service, subject, skill, evidence):
        naive = datetime(2030, 5, 1, 8, 30)
        draft = _draft(issuer_service, subject, skill, evidence, expires_at=naive)
        assert draft.expires_at == naive.replace(tzinfo=timezone.utc)


class TestDraftAndSeal:

    def test_id_and_issued_at_fixed_at_creation(self, issuer_service, subject, skill, evidence):
        draft = _draft(issuer_service, subject, skill, evidence)
        cred = draft.seal(None)
        assert cred.id == draft.id
        assert cred.issued_at == draft.issued_at
        assert cred.issued_at.tzinfo is not None

    def test_sealed_credential_is_hashable(self, credential):
        assert hash(credential) == hash(Microcredential.from_json(credential.to_json()))
        assert len({credential, credential.to_draft().seal(credential.signature)}) == 1
        assert {credential: "ok"}[credential] == "ok"

    def test_sealed_credential_is_immutable(self, credential):
        with pytest.raises(dataclasses.FrozenInstanceError):
            credential.signature = None
        with pytest.raises(TypeError):
            credential.metadata["k"] = "v"

    def test_draft_metadata(self, issuer_service, subject, skill, evidence):
        draft = _draft(issuer_service, subject, skill, evidence)
        draft.add_metadata("course", "CS101")
        draft.add_metadata("course", "CS102")
        assert dict(draft.seal(None).metadata) == {"course": "CS102"}

    def test_metadata_must_be_strings(self, issuer_service, subject, skill, evidence):
        draft = _draft(issuer_service, subject, skill, evidence)
        with pytest.raises(TypeError):
            draft.add_metadata("credits", 3)

    def test_to_draft_drops_signature(self, credential):
        draft = credential.to_draft()
        draft.add_metadata("note", "added later")
        resealed = draft.seal(None)
        assert resealed.signature is None
        assert resealed.id == credential.id
        assert resealed.issued_at == credential.issued_at
        assert "note" not in credential.metadata

    def test_signing_payload_excludes_signature(self, credential):
        payload = credential.signing_payload()
        assert "signature" not in payload
        assert credential.canonical_bytes() == credential.to_draft().canonical_bytes()

    def test_metadata_order_does_not_change_encoding(self, issuer_service, subject, skill, evidence):
        a = _draft(issuer_service, subject, skill, evidence, metadata={"x": "1", "y": "2"})
        b = dataclasses.replace(a, metadata={"y": "2", "x": "1"})
        assert a.canonical_bytes() == b.canonical_bytes()


class TestWireFormat:

    def test_json_round_trip(self, credential):
        restored = Microcredential.from_json(credential.to_json())
        assert restored == credential
        assert restored.canonical_bytes() == credential.canonical_bytes()

    def test_document_fields(self, credential):
        doc = json.loads(credential.to_json(indent=2))
        assert doc["id"] == str(credential.id)
        assert doc["skill"]["level"] == "Intermediate"
        assert doc["evidence"][0]["evidence_type"] == "Project"
        assert doc["issued_at"].endswith("Z")
        assert doc["expires_at"] is None
        assert doc["metadata"] == {}
        assert isinstance(doc["signature"], str)

    def test_unsigned_document_has_null_signature(self, issuer_service, subject, skill, evidence):
        doc = _draft(issuer_service, subject, skill, evidence).seal(None).to_dict()
        assert doc["signature"] is None
        assert Microcredential.from_dict(doc).signature is None

    @pytest.mark.parametrize("mutate", [
        lambda d: d.pop("issuer"),
        lambda d: d.update(id="not-a-uuid"),
        lambda d: d["skill"].update(level="Grandmaster"),
        lambda d: d.update(issued_at="yesterday"),
        lambda d: d["evidence"][0].update(evidence_type="Essay"),
    ])
    def test_malformed_document(self, credential, mutate):
        doc = credential.to_dict()
        mutate(doc)
        with pytest.raises(CredentialEncodingError):
            Microcredential.from_dict(doc)

    def test_not_a_json_object(self):
        with pytest.raises(CredentialEncodingError):
            Microcredential.from_json("[1, 2]")
        with pytest.raises(CredentialEncodingError):
            Microcredential.from_json("{not json")

    def test_iso_round_trip_keeps_microseconds(self):
        dt = datetime(2026, 3, 4, 5, 6, 7, 890123, tzinfo=timezone.utc)
        assert to_iso(dt) == "2026-03-04T05:06:07.890123Z"
        assert from_iso(to_iso(dt)) == dt


class TestValueTypes:

    def test_issuer_equality_by_id(self):
        issuer_id = uuid4()
        a = Issuer(issuer_id, "A", "https://a.example", b"\x01" * 32)
        b = Issuer(issuer_id, "B", "https://b.example", b"\x02" * 32)
        assert a == b
        assert hash(a) == hash(b)
        assert a != Issuer(uuid4(), "A", "https://a.example", b"\x01" * 32)

    def test_other_evidence_type(self):
        other = EvidenceType.other("Peer review")
        assert other.to_wire() == {"Other": "Peer review"}
        assert EvidenceType.from_wire({"Other": "Peer review"}) == other
        assert EvidenceType.from_wire("Portfolio") == EvidenceType.PORTFOLIO

    def test_evidence_type_validation(self):
        with pytest.raises(ValueError):
            EvidenceType("Essay")
        with pytest.raises(ValueError):
            EvidenceType("Other")
        with pytest.raises(ValueError):
            EvidenceType("Project", "extra")

    def test_evidence_round_trip(self):
        ev = Evidence(uuid4(), "Essay", "Long essay", "https://e.example", EvidenceType.other("Essay"))
        assert Evidence.from_dict(ev.to_dict()) == ev

    def test_skill_levels(self):
        assert [lvl.value for lvl in SkillLevel] == ["Beginner", "Intermediate", "Advanced", "Expert"]
