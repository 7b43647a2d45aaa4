from __future__ import annotations

from flask import Flask, jsonify, request

from ..checkin.qr import decode_identifier
from ..common.http import error_response, http_status_for, json_body, tenant_id
from ..common.validators import optional_int, optional_text, require_non_empty
from ..container import Container
from ..core.enums import Disposition
from ..core.exceptions import DomainError, ValidationError
from ..recap.model import RecapFilter


def _disposition(value) -> Disposition:
    try:
        return Disposition(str(value or Disposition.PRESENT.value))
    except ValueError:
        raise ValidationError("disposition must be Present or Excused")


def _outcome_response(outcome):
    return jsonify(outcome.to_dict()), 200 if outcome.ok else http_status_for(outcome.error_code)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/checkin/stage", methods=["POST"], endpoint="api_checkin_stage")
    def api_checkin_stage():
        data = json_body()
        try:
            event_id = require_non_empty(data.get("event_id"), "event_id")
            code = require_non_empty(data.get("code"), "code")
        except ValidationError as e:
            return error_response(e)

        step = container.checkin_service.stage(
            tenant_id=tenant_id(),
            event_id=event_id,
            code=code,
            session_id=optional_text(data.get("session_id")),
            manual=bool(data.get("manual")),
        )
        if step.outcome and not step.outcome.ok:
            return jsonify({"success": False, **step.to_dict()}), http_status_for(step.outcome.error_code)
        return jsonify({"success": True, **step.to_dict()})

    @app.route("/api/checkin/commit", methods=["POST"], endpoint="api_checkin_commit")
    def api_checkin_commit():
        # Stateless confirm: the staged member is re-resolved by exact id.
        data = json_body()
        try:
            event_id = require_non_empty(data.get("event_id"), "event_id")
            member_id = require_non_empty(data.get("member_id"), "member_id")
            disposition = _disposition(data.get("disposition"))
        except ValidationError as e:
            return error_response(e)

        outcome = container.checkin_service.process_check_in(
            tenant_id=tenant_id(),
            event_id=event_id,
            code=member_id,
            session_id=optional_text(data.get("session_id")),
            disposition=disposition,
            leave_reason=optional_text(data.get("leave_reason")),
        )
        return _outcome_response(outcome)

    @app.route("/api/checkin/image", methods=["POST"], endpoint="api_checkin_image")
    def api_checkin_image():
        file = request.files.get("image")
        try:
            if not file or not file.filename:
                raise ValidationError("No image uploaded")
            event_id = require_non_empty(request.form.get("event_id"), "event_id")
            code = decode_identifier(file.stream)
        except DomainError as e:
            return error_response(e)

        outcome = container.checkin_service.process_check_in(
            tenant_id=tenant_id(),
            event_id=event_id,
            code=code,
            session_id=optional_text(request.form.get("session_id")),
        )
        return _outcome_response(outcome)

    @app.route("/api/recap", endpoint="api_recap")
    def api_recap():
        try:
            recap_filter = RecapFilter(
                year=optional_int(request.args.get("year"), "year", min_value=1900, max_value=9999),
                month=optional_int(request.args.get("month"), "month", min_value=1, max_value=12),
            )
        except ValidationError as e:
            return error_response(e)

        report = container.recap_service.build_recap(
            tenant_id=tenant_id(),
            recap_filter=recap_filter,
            search=request.args.get("search"),
        )
        return jsonify({"success": True, **report.to_dict()})

    @app.route("/api/recap/trend", endpoint="api_recap_trend")
    def api_recap_trend():
        try:
            limit = optional_int(request.args.get("limit"), "limit", min_value=1, max_value=50)
        except ValidationError as e:
            return error_response(e)

        kwargs = {"limit": limit} if limit else {}
        points = container.recap_service.trend(tenant_id=tenant_id(), **kwargs)
        return jsonify(
            {
                "success": True,
                "points": [
                    {
                        "event_id": p.event_id,
                        "name": p.name,
                        "date": p.starts_at.strftime("%Y-%m-%d"),
                        "present": p.present,
                        "invited": p.invited,
                        "percentage": p.percentage,
                    }
                    for p in points
                ],
            }
        )
