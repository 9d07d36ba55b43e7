from uuid import uuid4

import pytest

from credentials.model import EvidenceType, Skill, SkillLevel, Subject, new_evidence
from issuer.issuer_service import CredentialIssuer
from verifier.verifier_service import CredentialVerifier


@pytest.fixture
def issuer_service():
    return CredentialIssuer("Test University", "https://test.edu")


@pytest.fixture
def subject():
    return Subject(id=uuid4(), name="Test Student", email="test@example.com")


@pytest.fixture
def skill():
    return Skill(
        id="test-skill",
        name="Test Skill",
        description="A test skill",
        level=SkillLevel.INTERMEDIATE,
    )


@pytest.fixture
def evidence():
    return [
        new_evidence(
            "Test Evidence",
            "Test evidence description",
            "https://example.com/evidence",
            EvidenceType.PROJECT,
        )
    ]


@pytest.fixture
def credential(issuer_service, subject, skill, evidence):
    return issuer_service.issue_credential(subject, skill, evidence, None)


@pytest.fixture
def verifier(issuer_service):
    v = CredentialVerifier()
    v.add_trusted_issuer(issuer_service.get_issuer_info())
    return v
