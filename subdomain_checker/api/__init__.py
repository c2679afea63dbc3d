"""API blueprint - JSON endpoints for availability checks and health."""

from __future__ import annotations

from flask import Blueprint

bp: Blueprint = Blueprint("api", __name__, url_prefix="/api")

from subdomain_checker.api import routes  # noqa: E402, F401
