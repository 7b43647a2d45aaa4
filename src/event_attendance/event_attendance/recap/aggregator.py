"""Historical attendance assessment.

All functions here are pure: they take members, records and events as plain
collections and never touch the store.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_TREND_EVENTS, TIER_EXCELLENT_MIN, TIER_FAIR_MIN, TIER_GOOD_MIN
from ..core.enums import AttendanceStatus, EventStatus, Tier
from ..events.model import Event
from ..members.model import Member
from .model import AssessmentResult, EventSummary, RecapFilter, TrendPoint

NEVER_ATTENDED = "NEVER_ATTENDED"


def assess_tier(percentage: float, invited_count: int) -> Tier:
    if invited_count <= 0:
        return Tier.NONE
    if percentage >= TIER_EXCELLENT_MIN:
        return Tier.EXCELLENT
    if percentage >= TIER_GOOD_MIN:
        return Tier.GOOD
    if percentage >= TIER_FAIR_MIN:
        return Tier.FAIR
    return Tier.POOR


def aggregate(
    members: Iterable[Member],
    records: Iterable[AttendanceRecord],
    events: Iterable[Event],
    recap_filter: Optional[RecapFilter] = None,
) -> dict[str, AssessmentResult]:
    """Per-member assessment over the events that pass ``recap_filter``.

    Members without a division are not eligible. Members holding no record at
    all were never invited and are left out; members whose records all fall
    outside the filter come back unscored (``Tier.NONE``).
    """
    recap_filter = recap_filter or RecapFilter()
    event_ids = {e.event_id for e in events if recap_filter.matches(e)}

    by_member: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        by_member[r.member_id].append(r)

    out: dict[str, AssessmentResult] = {}
    for m in members:
        if not m.is_active or m.member_id not in by_member:
            continue

        mine = [r for r in by_member[m.member_id] if r.event_id in event_ids]
        invited = len(mine)
        present = sum(1 for r in mine if r.status.is_present)
        excused = sum(1 for r in mine if r.status.is_excused)
        absent = sum(1 for r in mine if r.status == AttendanceStatus.ABSENT)
        percentage = present / invited * 100 if invited else 0.0

        out[m.member_id] = AssessmentResult(
            member_id=m.member_id,
            full_name=m.full_name,
            division_name=m.division_name,
            invited_count=invited,
            present_count=present,
            excused_count=excused,
            absent_count=absent,
            percentage=percentage,
            tier=assess_tier(percentage, invited),
        )
    return out


def rank_results(results: Iterable[AssessmentResult]) -> list[AssessmentResult]:
    """Highest percentage first, then name, then id for a total order."""
    return sorted(results, key=lambda r: (-r.percentage, r.full_name.casefold(), r.member_id))


def search_results(results: Iterable[AssessmentResult], text: Optional[str]) -> list[AssessmentResult]:
    needle = (text or "").strip().casefold()
    if not needle:
        return list(results)
    return [
        r
        for r in results
        if needle in r.full_name.casefold() or needle in (r.division_name or "").casefold()
    ]


def tier_counts(results: Iterable[AssessmentResult]) -> dict[str, int]:
    counts = {t.value: 0 for t in (Tier.EXCELLENT, Tier.GOOD, Tier.FAIR, Tier.POOR)}
    counts[NEVER_ATTENDED] = 0
    for r in results:
        if r.tier != Tier.NONE:
            counts[r.tier.value] += 1
        if r.never_attended:
            counts[NEVER_ATTENDED] += 1
    return counts


def summarize_event(event_id: str, records: Iterable[AttendanceRecord]) -> EventSummary:
    present = excused = absent = total = 0
    for r in records:
        if r.event_id != event_id:
            continue
        total += 1
        if r.status.is_present:
            present += 1
        elif r.status.is_excused:
            excused += 1
        else:
            absent += 1
    return EventSummary(event_id=event_id, present=present, excused=excused, absent=absent, total=total)


def attendance_trend(
    events: Iterable[Event],
    records: Iterable[AttendanceRecord],
    *,
    limit: int = DEFAULT_TREND_EVENTS,
) -> list[TrendPoint]:
    """Present rate of the last ``limit`` completed events, oldest first."""
    completed = sorted((e for e in events if e.status == EventStatus.COMPLETED), key=lambda e: e.starts_at)
    recent = completed[-limit:] if limit > 0 else []

    records = list(records)
    points = []
    for e in recent:
        summary = summarize_event(e.event_id, records)
        pct = round(summary.present / summary.total * 100) if summary.total else 0
        points.append(
            TrendPoint(
                event_id=e.event_id,
                name=e.name,
                starts_at=e.starts_at,
                present=summary.present,
                invited=summary.total,
                percentage=pct,
            )
        )
    return points
