"""Key Generation — chronologically sortable, globally unique entity keys.

Invariants:
    - Keys are 20 characters: 8 encode the millisecond timestamp, 12 are random
    - Lexicographic key order == creation order, also within one millisecond
      (the random part is incremented instead of re-drawn)
    - One scheme for every entity: boards, columns (col_<key>), properties
      (prop_<key>) and cards

Design Decisions:
    - Push-style keys instead of sequential col_<index> / col_<timestamp> ids:
      unique across clients without coordination, and the store's native key
      order doubles as a stable tie-breaker for equal `order` values
"""

import random
import threading
import time

from tablero.core.domain_types import COLUMN_ID_PREFIX, PROPERTY_ID_PREFIX

# Ordered by ASCII so string comparison matches numeric comparison
PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class KeyGenerator:
    """Monotonic push-key generator. Thread-safe."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = [0] * 12

    def next_key(self, now_ms: int | None = None) -> str:
        with self._lock:
            ms = int(time.time() * 1000) if now_ms is None else now_ms
            if ms == self._last_ms:
                self._increment()
            else:
                self._last_ms = ms
                self._last_random = [self._rng.randrange(64) for _ in range(12)]
            return _encode_time(ms) + "".join(PUSH_CHARS[i] for i in self._last_random)

    def _increment(self) -> None:
        for i in range(11, -1, -1):
            if self._last_random[i] != 63:
                self._last_random[i] += 1
                return
            self._last_random[i] = 0


def _encode_time(ms: int) -> str:
    chars = []
    for _ in range(8):
        chars.append(PUSH_CHARS[ms % 64])
        ms //= 64
    return "".join(reversed(chars))


_generator = KeyGenerator()


def new_key() -> str:
    return _generator.next_key()


def new_column_id() -> str:
    return COLUMN_ID_PREFIX + new_key()


def new_property_id() -> str:
    return PROPERTY_ID_PREFIX + new_key()


def now_ms() -> int:
    """Epoch milliseconds, the timestamp unit of createdAt / updatedAt."""
    return int(time.time() * 1000)
