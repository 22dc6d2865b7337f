"""Time-ordered business IDs for markets, stakes and charity entries.

IDs increase with creation time within one process. Single-process
generator; each worker process should be started with its own worker_id.
"""

import threading
import time


class TimeOrderedIdGenerator:
    """Snowflake-style 64-bit IDs.

    Layout:
      - 41 bits: milliseconds since _EPOCH_MS
      - 10 bits: worker_id (0-1023)
      - 12 bits: per-millisecond sequence (0-4095)
    """

    _EPOCH_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z
    _WORKER_BITS = 10
    _SEQUENCE_BITS = 12
    _SEQUENCE_MASK = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, worker_id: int = 0) -> None:
        if not (0 <= worker_id < (1 << self._WORKER_BITS)):
            raise ValueError(f"worker_id must be 0-{(1 << self._WORKER_BITS) - 1}")
        self._worker_id = worker_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_int(self) -> int:
        with self._lock:
            now_ms = self._clock_ms()
            if now_ms < self._last_ms:
                # clock stepped backwards: keep issuing from the last timestamp
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._SEQUENCE_MASK
                if self._sequence == 0:
                    now_ms = self._until_next_ms(now_ms)
            else:
                self._sequence = 0
            self._last_ms = now_ms
            return (
                ((now_ms - self._EPOCH_MS) << (self._WORKER_BITS + self._SEQUENCE_BITS))
                | (self._worker_id << self._SEQUENCE_BITS)
                | self._sequence
            )

    def next_id(self, prefix: str = "") -> str:
        return f"{prefix}{self.next_int()}"

    def _clock_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def _until_next_ms(self, last_ms: int) -> int:
        now_ms = self._clock_ms()
        while now_ms <= last_ms:
            now_ms = self._clock_ms()
        return now_ms


_default_generator = TimeOrderedIdGenerator()


def generate_id(prefix: str = "") -> str:
    """Generate a unique, time-ordered string ID, e.g. generate_id("STK-")."""
    return _default_generator.next_id(prefix)
