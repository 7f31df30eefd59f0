from typing import Optional

from flask import g, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from datetime import datetime, timezone

from marketplace.core.exceptions import UnauthorizedError, ValidationError


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message

    request_id = getattr(g, "request_id", None)
    if request_id:
        response["request_id"] = request_id

    return jsonify(response), status


def get_optional_user_id() -> Optional[int]:
    """User ID from the X-User-Id header, or None when the header is absent."""
    uid = request.headers.get("X-User-Id")
    if not uid:
        return None
    try:
        user_id = int(uid)
    except ValueError:
        raise ValidationError("Invalid X-User-Id header: must be a positive integer.")
    if user_id <= 0:
        raise ValidationError("User ID must be a positive integer.")
    return user_id


def get_current_user_id() -> int:
    """Extract and validate user ID from X-User-Id request header."""
    user_id = get_optional_user_id()
    if user_id is None:
        raise UnauthorizedError("Missing X-User-Id header.")
    return user_id


def load_or_400(schema, data):
    """Run a marshmallow schema; validation failures become a 400 envelope."""
    try:
        return schema.load(data)
    except MarshmallowValidationError as err:
        raise ValidationError("Invalid request parameters", err.messages)
