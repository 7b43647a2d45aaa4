"""Roster diffing.

``reconcile`` is a pure set difference between the target invite list and the
invitees currently holding an attendance record. Applying the result is the
caller's job (see ``RosterService``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable

from ..attendance.model import AttendanceRecord


@dataclass(frozen=True)
class RosterDiff:
    event_id: str
    to_add: frozenset[str]
    to_remove: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def reconcile(event_id: str, target_member_ids: Iterable[str], current_records: Iterable[AttendanceRecord]) -> RosterDiff:
    target = frozenset(target_member_ids)
    current = frozenset(r.member_id for r in current_records if r.event_id == event_id)
    return RosterDiff(event_id=event_id, to_add=target - current, to_remove=current - target)


def destructive_removals(diff: RosterDiff, current_records: Iterable[AttendanceRecord]) -> list[str]:
    """Ids in ``to_remove`` whose record holds a Present*/Excused* status."""
    return sorted(
        r.member_id
        for r in current_records
        if r.event_id == diff.event_id
        and r.member_id in diff.to_remove
        and (r.status.is_present or r.status.is_excused)
    )


def apply_diff(current_member_ids: AbstractSet[str], diff: RosterDiff) -> frozenset[str]:
    return (frozenset(current_member_ids) | diff.to_add) - diff.to_remove
