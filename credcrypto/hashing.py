import hashlib

DIGEST_LENGTH = 32

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def hash_credential(credential_data: bytes) -> bytes:
    """Digest of a canonical credential encoding; this is what gets signed."""
    return sha256(credential_data)
