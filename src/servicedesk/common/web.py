"""Flask helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.context import ActorContext
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendUnavailable,
    DomainError,
    InvalidTransition,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFound, 404),
    (InvalidTransition, 409),
    (BackendUnavailable, 503),
)


def current_actor() -> ActorContext:
    return ActorContext(user_id=int(session["user_id"]), role=Role(session["role"]))


def request_payload() -> dict:
    """JSON object body, falling back to form fields."""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def lead_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please sign in to continue"}), 401
        if not Role(session.get("role")).is_lead:
            return jsonify({"error": "You do not have permission"}), 403
        return view(*args, **kwargs)

    return wrapper


def error_response(exc: Exception):
    if isinstance(exc, DomainError):
        for cls, status in _STATUS_BY_ERROR:
            if isinstance(exc, cls):
                body = {"error": str(exc)}
                if isinstance(exc, InvalidTransition):
                    # Client view is stale; it should reload the record.
                    body["refetch"] = True
                return jsonify(body), status
        return jsonify({"error": str(exc)}), 400

    logger.exception("Unhandled error while serving request")
    return jsonify({"error": "Internal server error"}), 500


def ok(message: str, status: int = 200, **payload):
    return jsonify({"message": message, **payload}), status
