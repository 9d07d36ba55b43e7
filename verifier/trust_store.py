from __future__ import annotations

import threading
from typing import Iterator, List, Optional, Tuple
from uuid import UUID

from credentials.model import Issuer


class TrustStore:
    """
    Issuer identities a verifier accepts signatures from.

    Owned by a single verifier instance. Reads and writes take the same
    lock, so one store can be shared across threads; snapshot() hands out
    an immutable copy for callers that want to iterate without holding it.
    """

    def __init__(self, issuers=()):
        self._lock = threading.RLock()
        self._issuers: List[Issuer] = []
        for issuer in issuers:
            self.add(issuer)

    def add(self, issuer: Issuer) -> None:
        """Add an issuer. Re-adding an id replaces the stored identity in place."""
        with self._lock:
            for i, existing in enumerate(self._issuers):
                if existing.id == issuer.id:
                    self._issuers[i] = issuer
                    return
            self._issuers.append(issuer)

    def remove(self, issuer_id: UUID) -> bool:
        with self._lock:
            before = len(self._issuers)
            self._issuers = [i for i in self._issuers if i.id != issuer_id]
            return len(self._issuers) != before

    def get(self, issuer_id: UUID) -> Optional[Issuer]:
        with self._lock:
            for issuer in self._issuers:
                if issuer.id == issuer_id:
                    return issuer
            return None

    def snapshot(self) -> Tuple[Issuer, ...]:
        with self._lock:
            return tuple(self._issuers)

    def __contains__(self, issuer_id: UUID) -> bool:
        return self.get(issuer_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._issuers)

    def __iter__(self) -> Iterator[Issuer]:
        return iter(self.snapshot())
