from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Optional, Tuple
import logging
import threading

from pydantic import BaseModel, ConfigDict

log = logging.getLogger("canary.ledger")

PING_COUNT = 8


class PingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    reason: str


class PingLedger:
    '''
    Bounded in-memory log of the most recent pings.
    - record() appends the newest entry and drops the oldest past PING_COUNT
    - snapshot() returns an immutable copy, newest first
    Both go through one lock, so readers never see a half-applied write.
    '''
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or now_utc
        self._lock = threading.Lock()
        self._dq: Deque[PingRecord] = deque(maxlen=PING_COUNT)

    @property
    def capacity(self) -> int:
        return PING_COUNT

    def record(self, reason: str) -> PingRecord:
        with self._lock:
            ts = self._clock()
            # wall clock may step backwards (NTP); keep arrival order monotonic
            if self._dq and ts < self._dq[-1].timestamp:
                ts = self._dq[-1].timestamp
            item = PingRecord(timestamp=ts, reason=reason)
            self._dq.append(item)
        log.info("Recorded ping (%d chars)", len(reason))
        return item

    def snapshot(self) -> Tuple[PingRecord, ...]:
        with self._lock:
            return tuple(reversed(self._dq))

    def __len__(self) -> int:
        with self._lock:
            return len(self._dq)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
