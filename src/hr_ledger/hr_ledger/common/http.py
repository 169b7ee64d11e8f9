from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.actor import Actor
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ImmutableRecordError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .datetime_utils import parse_iso_date

# First match wins, so subclasses must come before their parents.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ImmutableRecordError, 409),
)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_jsonable(value: Any) -> Any:
    """Convert records to JSON-ready values; dataclass fields become camelCase keys."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {camel_case(f.name): to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {to_jsonable(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return str(value)


def ok(data=None, status=200, **meta):
    payload = {"success": True, "data": to_jsonable(data)}
    if meta:
        payload["meta"] = to_jsonable(meta)
    return jsonify(payload), status


def fail(message="Bad Request", status=400, code=None):
    err = {"message": message}
    if code:
        err["code"] = code
    return jsonify({"success": False, "error": err}), status


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        status = status_for(e)
        if status == 409:
            app.logger.info("Rejected with %s: %s", e.code, e)
        return fail(str(e) or e.code, status=status, code=e.code)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500, code="INTERNAL_ERROR")


def current_actor(employees: Optional[EmployeeRepository] = None) -> Actor:
    """Build the acting identity from the session set by the login layer.

    When the session carries no employee id, it is looked up by user id.
    """
    user_id = int(session["user_id"])
    employee_id = session.get("employee_id")
    if employee_id is None and employees is not None:
        employee = employees.get_by_user_id(user_id)
        employee_id = employee.employee_id if employee else None
    return Actor(
        user_id=user_id,
        role=Role(session.get("role", Role.USER.value)),
        employee_id=int(employee_id) if employee_id is not None else None,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", status=401, code="UNAUTHENTICATED")
        return view(*args, **kwargs)

    return wrapper


def date_arg(value: Optional[str], field_name: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def datetime_arg(value: Optional[str], field_name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an ISO 8601 timestamp")
    if parsed.tzinfo is not None:
        raise ValidationError(f"{field_name} must be a local time without a UTC offset")
    return parsed


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def page_meta(page) -> dict:
    return {"pagination": page.pagination()}


def int_arg(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is required and must be a number")
