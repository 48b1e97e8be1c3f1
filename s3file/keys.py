from __future__ import annotations

import re
import secrets
import threading
import time

# hhhh/hhhh/hhhh-<epoch ms>
KEY_PATTERN = re.compile(r"^[0-9a-f]{4}/[0-9a-f]{4}/[0-9a-f]{4}-\d+$")

_clock_lock = threading.Lock()
_last_ms = 0


def _random_hex_of_4() -> str:
    return f"{secrets.randbits(16):04x}"


def _epoch_ms() -> int:
    # wall clock, held at the last value seen if the system clock steps back
    global _last_ms
    now = time.time_ns() // 1_000_000
    with _clock_lock:
        _last_ms = max(_last_ms, now)
        return _last_ms


def generate_key() -> str:
    """
    Mint a fresh object key.

    Three independent 16-bit random segments plus a millisecond timestamp,
    so concurrent callers need no coordination to avoid collisions.
    """
    return f"{_random_hex_of_4()}/{_random_hex_of_4()}/{_random_hex_of_4()}-{_epoch_ms()}"
