from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import CheckInState, Disposition
from ..core.exceptions import DomainError, NotFoundError, StoreReadFailure, StoreWriteFailure
from ..events.repository import EventRepository
from ..members.directory import MemberDirectory
from . import processor
from .model import CheckInStep, Outcome

logger = logging.getLogger(__name__)


class CheckInService:
    """Drives one scan attempt through the check-in state machine.

    Operator-level failures (unknown member, event not open, store rejection)
    come back as an ``ERROR`` outcome instead of an exception.
    """

    def __init__(
        self,
        events: EventRepository,
        directory: MemberDirectory,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._directory = directory
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def stage(
        self,
        *,
        tenant_id: str,
        event_id: str,
        code: str,
        session_id: Optional[str] = None,
        manual: bool = False,
        now: datetime | None = None,
    ) -> CheckInStep:
        try:
            event = self._events.get_by_id(tenant_id=tenant_id, event_id=event_id)
        except StoreReadFailure as e:
            logger.warning("check-in for event %s: event not loaded: %s", event_id, e)
            return processor.mark_failed(CheckInStep(state=CheckInState.IDLE), e)
        if not event:
            step = CheckInStep(state=CheckInState.IDLE)
            return processor.mark_failed(step, NotFoundError(f"Event not found: {event_id}"))

        step = processor.begin(event)
        try:
            member = self._directory.resolve(code, tenant_id=tenant_id, manual=manual)
        except DomainError as e:
            logger.info("check-in for event %s: %r not resolved (%s)", event_id, code, e.code)
            return processor.mark_failed(step, e)

        step = processor.resolve(step, member, session_id)
        if step.state == CheckInState.ERROR:
            return step
        return processor.stage(step, now=now or self._clock(), factory=self._factory)

    def commit(
        self,
        step: CheckInStep,
        *,
        disposition: Disposition,
        leave_reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> CheckInStep:
        processor.require_state(step, CheckInState.STAGED)
        now = now or self._clock()
        try:
            existing = self._attendance.get_for_event_and_member(
                event_id=step.event.event_id, member_id=step.member.member_id
            )
        except StoreReadFailure as e:
            logger.warning("check-in of %s at event %s not loaded: %s", step.member.member_id, step.event.event_id, e)
            return processor.mark_failed(step, e)
        planned = processor.plan_commit(
            step,
            disposition=disposition,
            now=now,
            existing=existing,
            factory=self._factory,
            leave_reason=leave_reason,
        )
        try:
            self._attendance.upsert_attendance(planned.effect)
        except StoreWriteFailure as e:
            logger.warning("check-in of %s at event %s not saved: %s", step.member.member_id, step.event.event_id, e)
            return processor.mark_failed(step, e)

        done = processor.mark_committed(planned)
        logger.info(
            "checked in %s at event %s session %s as %s",
            step.member.member_id,
            step.event.event_id,
            step.session.session_id,
            done.effect.status.value,
        )
        return done

    def abandon(self, step: CheckInStep) -> CheckInStep:
        return processor.abandon(step)

    def process_check_in(
        self,
        *,
        tenant_id: str,
        event_id: str,
        code: str,
        session_id: Optional[str] = None,
        manual: bool = False,
        disposition: Disposition = Disposition.PRESENT,
        leave_reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> Outcome:
        """Stage and immediately confirm, for callers with no confirmation step."""
        now = now or self._clock()
        step = self.stage(
            tenant_id=tenant_id, event_id=event_id, code=code, session_id=session_id, manual=manual, now=now
        )
        if step.state != CheckInState.STAGED:
            return step.outcome
        return self.commit(step, disposition=disposition, leave_reason=leave_reason, now=now).outcome
