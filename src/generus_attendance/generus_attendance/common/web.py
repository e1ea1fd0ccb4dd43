from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import ErrorCode, Role
from ..core.result import Result
from .datetime_utils import parse_optional_date
from .serialization import to_json

_STATUS_BY_ERROR = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.AUTHENTICATION_FAILED: 401,
    ErrorCode.INACTIVE: 403,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.MEMBER_NOT_FOUND_OR_INACTIVE: 404,
    ErrorCode.DUPLICATE_CHECKIN_TODAY: 409,
}


def result_response(result: Result, *, created: bool = False):
    """Render a service ``Result`` as the JSON envelope used by every endpoint."""

    body = {"success": result.success, "message": result.message, "data": to_json(result.data)}
    if result.success:
        return jsonify(body), 201 if created else 200

    body["error"] = result.error.value if result.error else None
    return jsonify(body), _STATUS_BY_ERROR.get(result.error, 400)


def data_response(data: Any, status: int = 200):
    return jsonify({"success": True, "data": to_json(data)}), status


def not_found(message: str):
    return jsonify({"success": False, "message": message, "error": ErrorCode.NOT_FOUND.value}), 404


def bad_request(message: str):
    return jsonify({"success": False, "message": message, "error": ErrorCode.VALIDATION_ERROR.value}), 400


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue",
                            "error": ErrorCode.AUTHENTICATION_FAILED.value}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please log in to continue",
                                "error": ErrorCode.AUTHENTICATION_FAILED.value}), 401
            if session.get("role") not in allowed:
                return jsonify({"success": False, "message": "You do not have permission",
                                "error": ErrorCode.FORBIDDEN.value}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def start_session(user, *, remember: bool = False) -> None:
    """Store the logged-in identity in the Flask session."""

    session.clear()
    session.permanent = bool(remember)
    session["user_id"] = user.user_id
    session["name"] = user.name
    session["role"] = user.role


def query_date(name: str):
    """Optional ``YYYY-MM-DD`` query parameter; raises ``ValueError`` when malformed."""

    return parse_optional_date(request.args.get(name))


def query_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    return int(value)
