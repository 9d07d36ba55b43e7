from Crypto.Signature import eddsa
from Crypto.PublicKey import ECC

from credcrypto.keys import (
    SIGNATURE_LENGTH,
    InvalidSignatureLength,
    SignatureDecodeError,
    decode_point,
    import_public_key,
)

# Order of the Ed25519 base point (RFC8032 section 5.1)
GROUP_ORDER = 2**252 + 27742317777372353535851937790883648493

def ed25519_sign(message: bytes, sk: ECC.EccKey) -> bytes:
    """
    Standard Ed25519 over the raw message bytes (RFC8032).
    Credentials pass their SHA-256 digest in here, not the document.
    """
    signer = eddsa.new(sk, mode="rfc8032")
    return signer.sign(message)

def ed25519_verify(message: bytes, sig: bytes, pk: ECC.EccKey) -> bool:
    """
    Verify standard Ed25519 signature over raw message bytes.
    """
    try:
        verifier = eddsa.new(pk, mode="rfc8032")
        verifier.verify(message, sig)
        return True
    except ValueError:
        return False

def check_signature_encoding(signature: bytes) -> None:
    """
    Reject a 64-byte signature that is not R || S with R an encoded curve
    point and S below the group order.
    """
    s = int.from_bytes(signature[32:], "little")
    if s >= GROUP_ORDER:
        raise SignatureDecodeError("Signature scalar S is not below the group order")
    try:
        decode_point(signature[:32])
    except ValueError as e:
        raise SignatureDecodeError(f"Signature point R is not a valid Ed25519 point: {e}") from e

def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Check a raw 64-byte signature against a raw 32-byte public key.

    Malformed key or signature bytes raise (InvalidKeyLength,
    InvalidSignatureLength, KeyDecodeError, SignatureDecodeError). A
    well-formed signature that does not match returns False.
    """
    pk = import_public_key(public_key)
    if len(signature) != SIGNATURE_LENGTH:
        raise InvalidSignatureLength(
            f"Invalid signature length: expected {SIGNATURE_LENGTH}, got {len(signature)}"
        )
    check_signature_encoding(signature)
    return ed25519_verify(message, bytes(signature), pk)
