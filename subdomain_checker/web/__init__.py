"""Web blueprint - the single-page availability check form."""

from __future__ import annotations

from flask import Blueprint

bp: Blueprint = Blueprint("web", __name__, url_prefix="/")

from subdomain_checker.web import routes  # noqa: E402, F401
