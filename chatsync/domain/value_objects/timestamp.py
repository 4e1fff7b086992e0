"""
Timestamp Value Object - backend Time, integer nanoseconds since the Unix epoch.

Ordering and equality use the full nanosecond value; `to_datetime()` is a
microsecond-precision view for display.
"""

from __future__ import annotations
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class Timestamp:
    ns: int

    def __post_init__(self):
        if isinstance(self.ns, bool) or not isinstance(self.ns, int):
            raise ValueError(f"Timestamp must be integer nanoseconds, got {self.ns!r}")

    @classmethod
    def now(cls) -> Timestamp:
        return cls(time.time_ns())

    def to_datetime(self) -> datetime:
        return _EPOCH + timedelta(microseconds=self.ns // 1000)

    def __str__(self) -> str:
        return self.to_datetime().isoformat()
