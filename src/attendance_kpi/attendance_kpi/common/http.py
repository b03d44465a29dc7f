from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Authentication required", 401)
        if session.get("role") != Role.MANAGER.value:
            return error("Access forbidden: managers only", 403)
        return view(*args, **kwargs)

    return wrapper


def json_endpoint(view):
    """Translate domain errors into JSON responses (400 / 403 / 404, 500 otherwise)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthorizationError as e:
            return error(str(e), 403)
        except NotFoundError as e:
            return error(str(e), 404)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return error("Internal server error", 500)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def date_arg(name: str, source: Optional[dict] = None) -> Optional[date]:
    raw = (source if source is not None else request.args).get(name)
    if not raw:
        return None
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
