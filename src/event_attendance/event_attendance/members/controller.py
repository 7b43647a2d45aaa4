from __future__ import annotations

from flask import Flask, jsonify, send_file

from ..common.http import error_response, tenant_id
from ..container import Container
from ..core.exceptions import DomainError, NotFoundError
from .cards import member_qr_png


def register(app: Flask, container: Container) -> None:
    @app.route("/api/members/<member_id>/history", endpoint="api_member_history")
    def api_member_history(member_id: str):
        try:
            rows = container.recap_service.member_history(tenant_id=tenant_id(), member_id=member_id)
        except DomainError as e:
            return error_response(e)

        present = sum(1 for r in rows if r.status.is_present)
        percentage = round(present / len(rows) * 100) if rows else 0
        return jsonify(
            {
                "success": True,
                "member_id": member_id,
                "present": present,
                "total": len(rows),
                "percentage": percentage,
                "history": [r.to_dict() for r in rows],
            }
        )

    @app.route("/api/members/<member_id>/qr", endpoint="api_member_qr")
    def api_member_qr(member_id: str):
        member = container.members_repo.get_by_id(tenant_id=tenant_id(), member_id=member_id)
        if not member:
            return error_response(NotFoundError(f"Member not found: {member_id}"))
        return send_file(member_qr_png(member), mimetype="image/png")
