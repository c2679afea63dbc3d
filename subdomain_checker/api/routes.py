"""
API blueprint routes.

Provides the JSON endpoint behind the check form and a public health check.

Status codes for ``POST /api/check-domain``:
  400 - missing, empty or non-string ``subdomain`` (or a non-JSON body)
  500 - unexpected internal failure; no detail leaks to the caller
  200 - everything else, including whitespace-only input
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import jsonify, request

from subdomain_checker.api import bp
from subdomain_checker.checker.handler import EMPTY_INPUT_MESSAGE
from subdomain_checker.utils.checks import run_configured_check

logger = logging.getLogger(__name__)

_INTERNAL_ERROR_MESSAGE = "An error occurred. Please try again"


def _error_response(message: str, status: int):
    return jsonify({"available": False, "message": message}), status


@bp.route("/health")
def health():
    """Public health-check endpoint."""
    return jsonify(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "Subdomain Availability Checker",
        }
    )


@bp.route("/check-domain", methods=["POST"])
def check_domain():
    """Check whether the posted subdomain is available.

    Request body: ``{"subdomain": "myapp"}``
    Response body: ``{"available": true, "message": "myapp.vercel.app is available!"}``
    """
    try:
        payload = request.get_json(silent=True)
        subdomain = payload.get("subdomain") if isinstance(payload, dict) else None

        if not subdomain or not isinstance(subdomain, str):
            return _error_response(EMPTY_INPUT_MESSAGE, 400)

        result = run_configured_check(subdomain)
        return jsonify(result.to_dict())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error checking domain: %s", exc)
        return _error_response(_INTERNAL_ERROR_MESSAGE, 500)
