from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import EventStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Event
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, events: EventRepository):
        self._events = events

    def get_event(self, *, tenant_id: str, event_id: str) -> Event:
        event = self._events.get_by_id(tenant_id=tenant_id, event_id=event_id)
        if not event:
            raise NotFoundError(f"Event not found: {event_id}")
        return event

    def list_events(self, *, tenant_id: str, year: Optional[int] = None, month: Optional[int] = None) -> Sequence[Event]:
        return self._events.select_events(tenant_id=tenant_id, year=year, month=month)

    def open_session(self, *, tenant_id: str, event_id: str, now: datetime | None = None) -> Event:
        """Open live check-in. The first opening instant is kept on later calls."""
        event = self.get_event(tenant_id=tenant_id, event_id=event_id)
        if event.status == EventStatus.CANCELLED:
            raise ValidationError("Cannot open a cancelled event")
        if event.is_open:
            return event

        now = now or now_local()
        if self._events.set_actual_start_time(tenant_id=tenant_id, event_id=event_id, started_at=now):
            logger.info("event %s opened for check-in at %s", event_id, now.isoformat())
        return self.get_event(tenant_id=tenant_id, event_id=event_id)
