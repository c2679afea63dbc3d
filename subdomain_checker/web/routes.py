"""
Web blueprint routes.

GET  /  - render the empty check form
POST /  - run the check and render the result under the form
"""

from __future__ import annotations

import logging

from flask import current_app, render_template

from subdomain_checker.checker.handler import AvailabilityResult, EMPTY_INPUT_MESSAGE
from subdomain_checker.utils.checks import run_configured_check
from subdomain_checker.web import bp
from subdomain_checker.web.forms import CheckSubdomainForm

logger = logging.getLogger(__name__)


@bp.route("/", methods=["GET", "POST"])
def index():
    """Availability check page."""
    form = CheckSubdomainForm()
    result: AvailabilityResult | None = None

    if form.validate_on_submit():
        try:
            result = run_configured_check(form.subdomain.data)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Check from form failed: %s", exc)
            result = AvailabilityResult(False, "An error occurred while checking")
    elif form.is_submitted() and form.subdomain.errors:
        result = AvailabilityResult(False, EMPTY_INPUT_MESSAGE)

    return render_template(
        "index.html",
        form=form,
        result=result,
        suffix=current_app.config["PLATFORM_SUFFIX"],
    )
