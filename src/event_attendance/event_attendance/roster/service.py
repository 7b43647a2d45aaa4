from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.exceptions import (
    NotFoundError,
    PartialBatchFailure,
    RosterConfirmationRequired,
    StoreWriteFailure,
    UnknownMemberError,
)
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from .reconciler import RosterDiff, destructive_removals, reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterSyncResult:
    event_id: str
    added: list[str]
    removed: list[str]

    def to_dict(self) -> dict:
        return {"event_id": self.event_id, "added": self.added, "removed": self.removed}


class RosterService:
    def __init__(self, events: EventRepository, members: MemberRepository, attendance: AttendanceRepository):
        self._events = events
        self._members = members
        self._attendance = attendance

    def _target_ids(self, *, tenant_id: str, member_ids: Optional[Iterable[str]], invite_all: bool) -> set[str]:
        members = self._members.select_members(tenant_id=tenant_id)
        if invite_all:
            return {m.member_id for m in members if m.is_active}

        target = {str(mid).strip() for mid in (member_ids or []) if str(mid).strip()}
        unknown = target - {m.member_id for m in members}
        if unknown:
            raise UnknownMemberError("Unknown member ids: " + ", ".join(sorted(unknown)))
        return target

    def plan(
        self,
        *,
        tenant_id: str,
        event_id: str,
        member_ids: Optional[Iterable[str]] = None,
        invite_all: bool = False,
    ) -> tuple[RosterDiff, list[str]]:
        """Diff plus the removals that would discard recorded attendance."""
        if not self._events.get_by_id(tenant_id=tenant_id, event_id=event_id):
            raise NotFoundError(f"Event not found: {event_id}")

        target = self._target_ids(tenant_id=tenant_id, member_ids=member_ids, invite_all=invite_all)
        current = list(self._attendance.select_attendance(tenant_id=tenant_id, event_id=event_id))
        diff = reconcile(event_id, target, current)
        return diff, destructive_removals(diff, current)

    def sync_roster(
        self,
        *,
        tenant_id: str,
        event_id: str,
        member_ids: Optional[Iterable[str]] = None,
        invite_all: bool = False,
        confirm_removals: bool = False,
    ) -> RosterSyncResult:
        diff, destructive = self.plan(
            tenant_id=tenant_id, event_id=event_id, member_ids=member_ids, invite_all=invite_all
        )
        if destructive and not confirm_removals:
            raise RosterConfirmationRequired(destructive)

        to_add = sorted(diff.to_add)
        to_remove = sorted(diff.to_remove)

        if to_add:
            try:
                self._attendance.insert_attendance([AttendanceRecord.placeholder(event_id, mid) for mid in to_add])
            except StoreWriteFailure as e:
                logger.error("roster sync for event %s: invite batch rejected (%s)", event_id, e)
                raise StoreWriteFailure(f"Inviting members failed ({', '.join(to_add)}): {e}") from e

        if to_remove:
            try:
                self._attendance.delete_attendance(event_id=event_id, member_ids=to_remove)
            except StoreWriteFailure as e:
                logger.error("roster sync for event %s: removal batch rejected (%s)", event_id, e)
                if to_add:
                    raise PartialBatchFailure(
                        "Members were invited but removals failed", failed_ids=to_remove, applied_ids=to_add
                    ) from e
                raise

        if destructive:
            logger.warning("roster sync for event %s discarded attendance of %s", event_id, ", ".join(destructive))
        logger.info("roster sync for event %s: +%d -%d", event_id, len(to_add), len(to_remove))
        return RosterSyncResult(event_id=event_id, added=to_add, removed=to_remove)
