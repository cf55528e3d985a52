# core/ids.py
"""
Id generation and the ledger clock.

Ids are `<PREFIX>-<8 hex chars>` taken from a UUID4. Collisions are not checked
here; the store rejects them with DuplicateIdError.
"""
import time
import uuid
from datetime import datetime, timezone

MS_PER_DAY = 24 * 60 * 60 * 1000


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def ms_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class MonotonicClock:
    """
    Ledger clock: never hands out a timestamp earlier than the previous one.

    Wall-clock adjustments can move time.time() backwards; ledger entries must
    still sort in creation order.
    """

    def __init__(self, source=now_ms):
        self._source = source
        self._last = 0

    def observe(self, value: int) -> None:
        """Advance the floor to a timestamp already present in the ledger."""
        if value > self._last:
            self._last = value

    def __call__(self) -> int:
        value = max(self._source(), self._last)
        self._last = value
        return value
