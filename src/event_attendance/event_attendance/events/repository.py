from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    """Event store interface.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, *, tenant_id: str, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def select_events(self, *, tenant_id: str, year: Optional[int] = None, month: Optional[int] = None) -> Sequence[Event]:
        raise NotImplementedError

    def set_actual_start_time(self, *, tenant_id: str, event_id: str, started_at: datetime) -> bool:
        """Set once; returns False when it was already set."""

        raise NotImplementedError
