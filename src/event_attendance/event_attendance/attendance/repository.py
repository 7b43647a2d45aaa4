from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance store, keyed uniquely by ``(event_id, member_id)``.

    Writes raise ``StoreWriteFailure`` when the store rejects them; a failed
    batch leaves no partial rows behind.
    """

    def select_attendance(
        self,
        *,
        tenant_id: str,
        event_id: Optional[str] = None,
        member_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_event_and_member(self, *, event_id: str, member_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_attendance(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def insert_attendance(self, records: Sequence[AttendanceRecord]) -> int:
        raise NotImplementedError

    def delete_attendance(self, *, event_id: str, member_ids: Sequence[str]) -> int:
        raise NotImplementedError
