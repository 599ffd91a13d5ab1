from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from functools import wraps
from typing import Any

from flask import Response, jsonify

from ..core.exceptions import DomainError
from ..core.logger import get_logger

logger = get_logger(__name__)


def to_json(value: Any) -> Any:
    """Dataclasses, dates and enums to plain JSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_json(asdict(value))
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def json_endpoint(view):
    """Wrap a view returning data into ``{"success": True, "data": ...}``.

    Responses (file downloads) pass through. Domain errors become 400,
    anything else 500.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            result = view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal error"}), 500
        if isinstance(result, Response):
            return result
        return jsonify({"success": True, "data": to_json(result)}), 200

    return wrapper
