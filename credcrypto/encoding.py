import base64
import binascii
import re
from typing import Union

_B64URL_CHARS = re.compile(r'^[A-Za-z0-9_-]*$')

def b64url_encode(data: bytes) -> str:
    """Unpadded URL-safe Base64, the wire form of keys and signatures."""
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')

def b64url_decode(s: Union[str, bytes]) -> bytes:
    """
    Strict inverse of b64url_encode.

    Padding is optional; any character outside the URL-safe alphabet
    raises binascii.Error rather than being silently dropped.
    """
    if isinstance(s, bytes):
        s = s.decode('ascii')
    s = s.rstrip('=')
    if not _B64URL_CHARS.match(s) or len(s) % 4 == 1:
        raise binascii.Error(f"Not a base64url string: {s!r}")
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)
