"""
Row helpers shared by every table and agent.
"""

import time
import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


def epoch_ms() -> int:
    """Milliseconds since the epoch. Used for memory timestamps and object keys."""
    return int(time.time() * 1000)


def iso_now() -> str:
    return utcnow().isoformat()


def today() -> str:
    """Current date as YYYY-MM-DD."""
    return utcnow().date().isoformat()
