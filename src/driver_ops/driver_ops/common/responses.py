from __future__ import annotations

import logging
from typing import Any

from flask import jsonify

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def ok(payload: dict[str, Any] | None = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def error_response(exc: Exception, *, context: str):
    """Map a domain error to its status code; anything else is a 500."""

    if isinstance(exc, DomainError):
        return jsonify({"success": False, "message": str(exc)}), exc.status_code

    logger.exception("[%s] Unexpected error", context)
    return jsonify({"success": False, "message": f"System error: {context}"}), 500
