from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import jsonify, request

from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-Id"
ACTOR_HEADER = "X-Actor"


def error_response(message: str, status: int, errors: list[dict] | None = None):
    return jsonify({"success": False, "message": message, "errors": list(errors or [])}), status


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 400


def json_api(view: Callable[..., Any]) -> Callable[..., Any]:
    """Map domain errors raised by a view to JSON error bodies."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e.message, status_for(e), e.errors)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return error_response("Internal server error", 500)

    return wrapper


def request_json() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def tenant_id() -> str:
    value = (request.headers.get(TENANT_HEADER) or "").strip()
    if not value:
        raise ValidationError(f"{TENANT_HEADER} header is required")
    return value


def actor() -> str | None:
    return (request.headers.get(ACTOR_HEADER) or "").strip() or None


def ok(data: Any = None, status: int = 200, **extra: Any):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status
