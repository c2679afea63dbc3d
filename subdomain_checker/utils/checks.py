"""Shared glue between Flask config and the availability handler."""
from __future__ import annotations

from flask import current_app

from subdomain_checker.checker.handler import AvailabilityResult, check_subdomain


def run_configured_check(raw: str | None) -> AvailabilityResult:
    """Run :func:`check_subdomain` with settings from the current app config.

    Args:
        raw: Subdomain as submitted by the user.

    Returns:
        The AvailabilityResult for ``raw``.
    """
    config = current_app.config
    return check_subdomain(
        raw,
        suffix=config["PLATFORM_SUFFIX"],
        timeout=config["PROBE_TIMEOUT_SECONDS"],
        strict=config["PROBE_STRICT_ERROR_STATUSES"],
    )
