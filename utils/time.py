import threading
from datetime import datetime, timedelta, timezone

# MongoDB stores datetimes with millisecond precision
_RESOLUTION = timedelta(milliseconds=1)


def get_current_utc_time() -> datetime:
    """Current UTC time truncated to the precision MongoDB keeps."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class MonotonicClock:
    """
    Hands out strictly increasing UTC timestamps within this process.

    Two messages created in the same millisecond (or after a backwards wall-clock
    step) still get distinct, ordered ``created_at`` values.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = None

    def now(self) -> datetime:
        current = get_current_utc_time()
        with self._lock:
            if self._last is not None and current <= self._last:
                current = self._last + _RESOLUTION
            self._last = current
            return current


message_clock = MonotonicClock()
