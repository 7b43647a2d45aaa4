from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, tenant_id
from ..container import Container
from ..core.exceptions import DomainError, PartialBatchFailure, RosterConfirmationRequired


def register(app: Flask, container: Container) -> None:
    @app.route("/api/events/<event_id>/open", methods=["POST"], endpoint="api_event_open")
    def api_event_open(event_id: str):
        try:
            event = container.event_service.open_session(tenant_id=tenant_id(), event_id=event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "event_id": event.event_id,
                "actual_start_time": event.actual_start_time.isoformat(),
                "sessions": [{"id": s.session_id, "name": s.name} for s in event.available_sessions],
            }
        )

    @app.route("/api/events/<event_id>/roster", methods=["POST"], endpoint="api_event_roster")
    def api_event_roster(event_id: str):
        data = json_body()
        try:
            result = container.roster_service.sync_roster(
                tenant_id=tenant_id(),
                event_id=event_id,
                member_ids=data.get("member_ids") or [],
                invite_all=bool(data.get("invite_all")),
                confirm_removals=bool(data.get("confirm_removals")),
            )
        except RosterConfirmationRequired as e:
            return error_response(e, member_ids=e.member_ids)
        except PartialBatchFailure as e:
            return error_response(e, failed_ids=e.failed_ids, applied_ids=e.applied_ids)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/events/<event_id>/summary", endpoint="api_event_summary")
    def api_event_summary(event_id: str):
        try:
            summary = container.recap_service.event_summary(tenant_id=tenant_id(), event_id=event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **summary.to_dict()})

    @app.route("/api/events/<event_id>/attendance/<member_id>", methods=["PUT"], endpoint="api_attendance_mark")
    def api_attendance_mark(event_id: str, member_id: str):
        data = json_body()
        try:
            record = container.attendance_service.mark_status(
                tenant_id=tenant_id(),
                event_id=event_id,
                member_id=member_id,
                status=str(data.get("status") or ""),
                leave_reason=data.get("leave_reason"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "member_id": member_id, "status": record.status.value})

    @app.route("/api/events/<event_id>/attendance/<member_id>", methods=["DELETE"], endpoint="api_attendance_reset")
    def api_attendance_reset(event_id: str, member_id: str):
        try:
            container.attendance_service.reset(tenant_id=tenant_id(), event_id=event_id, member_id=member_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "member_id": member_id})
