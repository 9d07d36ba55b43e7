from __future__ import annotations

from Crypto.PublicKey import ECC
from Crypto.Signature import eddsa

PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class CryptoError(ValueError):
    """Base class for key and signature encoding failures."""


class InvalidKeyLength(CryptoError):
    pass


class InvalidSignatureLength(CryptoError):
    pass


class KeyDecodeError(CryptoError):
    pass


class SignatureDecodeError(CryptoError):
    pass


# Ed25519 field prime
FIELD_PRIME = 2**255 - 19


def decode_point(encoded: bytes) -> ECC.EccKey:
    """
    Decode a 32-byte Ed25519 point encoding (RFC8032 section 5.1.3).
    A y coordinate at or above the field prime is rejected.
    """
    y = int.from_bytes(encoded, "little") & ((1 << 255) - 1)
    if y >= FIELD_PRIME:
        raise ValueError("Point encoding is not canonical (y >= p)")
    return eddsa.import_public_key(bytes(encoded))


def import_public_key(public_key: bytes) -> ECC.EccKey:
    """Decode a raw 32-byte Ed25519 public key (RFC8032 encoding)."""
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidKeyLength(
            f"Invalid public key length: expected {PUBLIC_KEY_LENGTH}, got {len(public_key)}"
        )
    try:
        return decode_point(public_key)
    except ValueError as e:
        raise KeyDecodeError(f"Public key is not a valid Ed25519 point: {e}") from e


def export_public_key(key: ECC.EccKey) -> bytes:
    return key.public_key().export_key(format='raw')


class CryptoKeyPair:
    """
    Ed25519 keypair held in memory.

    The secret seed is only reachable through secret_key(); the object
    refuses to be copied or pickled so the key stays with its owner.
    """

    def __init__(self, sk: ECC.EccKey):
        if not sk.has_private():
            raise KeyDecodeError("A private Ed25519 key is required")
        self._sk = sk
        self._pk_bytes = export_public_key(sk)

    @classmethod
    def generate(cls) -> CryptoKeyPair:
        # ECC.generate draws from Crypto.Random (the OS CSPRNG)
        return cls(ECC.generate(curve='Ed25519'))

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> CryptoKeyPair:
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise InvalidKeyLength(
                f"Invalid secret key length: expected {SECRET_KEY_LENGTH}, got {len(secret_key)}"
            )
        try:
            sk = eddsa.import_private_key(bytes(secret_key))
        except ValueError as e:
            raise KeyDecodeError(f"Secret key is not a valid Ed25519 seed: {e}") from e
        return cls(sk)

    def public_key(self) -> bytes:
        return self._pk_bytes

    def secret_key(self) -> bytes:
        return bytes(self._sk.seed)

    def sign(self, message: bytes) -> bytes:
        # local import: signing.py depends on this module for the constants
        from credcrypto.signing import ed25519_sign
        return ed25519_sign(message, self._sk)

    def __repr__(self) -> str:
        return f"CryptoKeyPair(public_key={self._pk_bytes.hex()})"

    def __copy__(self):
        raise TypeError("CryptoKeyPair holds secret key material and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("CryptoKeyPair holds secret key material and cannot be copied")

    def __reduce__(self):
        raise TypeError("CryptoKeyPair holds secret key material and cannot be pickled")
