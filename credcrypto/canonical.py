import json
from typing import Any


class CanonicalizationError(ValueError):
    """Raised when an object has no canonical JSON form."""


def canonicalize(obj: Any) -> bytes:
    """
        Canonicalise JSON encoding for signature and verification.
        -sort_keys = True. ensures stable key order
        -separators = (',', ':') removes whitespace variations
        -ensure_ascii = False keeps UTF-8 stable (then encode to UTF-8)
        -allow_nan = False rejects values JSON cannot represent
    """
    try:
        text = json.dumps(
            obj,
            sort_keys=True,
            separators=(',', ':'),
            ensure_ascii=False,
            allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationError(f"Cannot canonicalise object: {e}") from e
    return text.encode('utf-8')
