"""
Single-use markers for authorization codes.

Codes are self-contained JWTs, so nothing records that one was already
exchanged. When single-use codes are enabled the token endpoint asks a
UsedCodeStore to mark the code's ``jti`` before issuing tokens. The id is
taken from the verified claims, never from the token text, since several
encodings of one signed token all verify. The in-memory store is per
process; a multi-instance deployment needs a shared implementation behind
the same interface.
"""

import threading
import time
from typing import Callable, Dict, Protocol


class UsedCodeStore(Protocol):
    def mark_used(self, code_id: str, expires_at: int) -> bool:
        """Record ``code_id`` as exchanged. Returns True if it had already been used."""
        ...


class InMemoryUsedCodeStore:
    """Thread-safe map of exchanged codes, pruned once the codes expire"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._used: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._used)

    def _cleanup_expired(self, now: int):
        # An expired code fails verification anyway, so its marker can go
        self._used = {code_id: exp for code_id, exp in self._used.items() if exp > now}

    def mark_used(self, code_id: str, expires_at: int) -> bool:
        with self._lock:
            self._cleanup_expired(int(self._clock()))
            if code_id in self._used:
                return True
            self._used[code_id] = expires_at
            return False
