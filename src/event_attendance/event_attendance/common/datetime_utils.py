from __future__ import annotations

from datetime import datetime, time
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def on_same_day(anchor: datetime, at: Optional[time]) -> datetime:
    """Place a wall-clock time on the calendar date of ``anchor``."""
    if at is None:
        return anchor
    return datetime.combine(anchor.date(), at, tzinfo=anchor.tzinfo)
