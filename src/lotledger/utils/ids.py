"""Identifier and clock helpers."""

import threading
import time
from datetime import datetime

_lock = threading.Lock()
_last_issued = 0


def fresh_id() -> str:
    """Return an epoch-milliseconds string id.

    Ids issued by one process are strictly increasing; a call within the
    same millisecond as the previous one is bumped to the next value.
    """
    global _last_issued
    with _lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_issued:
            candidate = _last_issued + 1
        _last_issued = candidate
    return str(candidate)


def now() -> datetime:
    """Current local time, naive, as stored by the database."""
    return datetime.now()
