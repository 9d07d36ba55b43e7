import argparse
from datetime import timedelta
from uuid import uuid4

from credentials.model import EvidenceType, Skill, SkillLevel, Subject, new_evidence
from credentials.timeutil import utc_now
from demo.logs import setup_logging
from demo.settings import load_settings
from issuer.issuer_service import CredentialIssuer
from verifier.errors import VerificationError
from verifier.verifier_service import CredentialVerifier

def main(expired: bool = False) -> int:
    issuer = CredentialIssuer("Rust University", "https://rust-university.edu")
    print("Created issuer:", issuer.get_issuer_info().name)

    subject = Subject(id=uuid4(), name="Alice Developer", email="alice@example.com")
    skill = Skill(
        id="rust-programming",
        name="Rust Programming",
        description="Proficiency in Rust programming language",
        level=SkillLevel.ADVANCED,
    )
    evidence = [
        new_evidence(
            "Web Server Project",
            "Built a high-performance web server using Tokio",
            "https://github.com/alice/rust-webserver",
            EvidenceType.PROJECT,
        ),
        new_evidence(
            "Rust Certification Assessment",
            "Passed advanced Rust programming assessment",
            "https://assessments.rust-university.edu/alice/cert-123",
            EvidenceType.ASSESSMENT,
        ),
    ]
    expires_at = utc_now() - timedelta(days=1) if expired else None

    cred = issuer.issue_credential(subject, skill, evidence, expires_at)
    print("Issued credential for:", cred.subject.name)
    print(f"Skill: {cred.skill.name} (Level: {cred.skill.level.value})")
    print("Evidence count:", len(cred.evidence))
    print("Credential ID:", cred.id)
    print("Is valid:", cred.is_valid())

    verifier = CredentialVerifier()
    verifier.add_trusted_issuer(issuer.get_issuer_info())

    print("\n=== Verification Result ===")
    status = 0
    try:
        verifier.verify_credential(cred)
        print("Credential verification: VALID")
    except VerificationError as e:
        print("Verification failed:", e)
        status = 1

    print("\n=== Credential JSON ===")
    print(cred.to_json(indent=2))
    return status

if __name__ == "__main__":
    p = argparse.ArgumentParser(description="Issue and verify a sample microcredential")
    p.add_argument("--expired", action="store_true", help="Issue a credential that expired yesterday")
    args = p.parse_args()

    settings = load_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)
    raise SystemExit(main(expired=args.expired))
