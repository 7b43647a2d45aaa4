from __future__ import annotations

from typing import Optional

from flask import current_app, jsonify, request

from ..core.exceptions import DomainError

# DomainError.code -> HTTP status; anything unlisted is a 400.
_STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "UNKNOWN_MEMBER": 404,
    "UNKNOWN_SESSION": 404,
    "AMBIGUOUS_MEMBER": 409,
    "SESSION_NOT_OPEN": 409,
    "CONFIRMATION_REQUIRED": 409,
    "STORE_WRITE_FAILURE": 409,
    "STORE_READ_FAILURE": 503,
    "PARTIAL_BATCH_FAILURE": 409,
}


def http_status_for(code: Optional[str]) -> int:
    return _STATUS_BY_CODE.get(code or "", 400)


def tenant_id() -> str:
    """Tenant from the X-Tenant-Id header, else the configured default."""
    value = (request.headers.get("X-Tenant-Id") or "").strip()
    return value or str(current_app.config["DEFAULT_TENANT_ID"])


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def error_response(e: DomainError, **extra):
    body = {"success": False, "message": str(e), "error_code": e.code}
    body.update(extra)
    return jsonify(body), http_status_for(e.code)
