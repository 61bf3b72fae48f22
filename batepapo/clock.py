import time
from datetime import datetime
from typing import Optional


def now_ms() -> int:
    """Wall-clock epoch milliseconds, used for participant lastStatus."""
    return int(time.time() * 1000)


def clock_time(ms: Optional[int] = None) -> str:
    """Format a timestamp as HH:MM:SS for message ``time`` fields."""
    dt = datetime.now() if ms is None else datetime.fromtimestamp(ms / 1000)
    return dt.strftime("%H:%M:%S")
