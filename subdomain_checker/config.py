"""
Configuration module for the subdomain availability checker.

Loads settings from environment variables with sensible defaults.
"""

import os

from subdomain_checker.checker.handler import DEFAULT_PLATFORM_SUFFIX
from subdomain_checker.checker.probe import DEFAULT_TIMEOUT_SECONDS


class Config:
    """Base configuration shared by all environments."""

    # Security
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    # Request payload limit; the only body we accept is a tiny JSON object.
    MAX_CONTENT_LENGTH: int = 16 * 1024

    # CSRF protection (Flask-WTF) for the HTML form
    WTF_CSRF_ENABLED: bool = True

    # Hosting platform whose wildcard domain we probe
    PLATFORM_SUFFIX: str = DEFAULT_PLATFORM_SUFFIX

    # Hard wall-clock budget for a single probe
    PROBE_TIMEOUT_SECONDS: float = DEFAULT_TIMEOUT_SECONDS

    # When False, 5xx responses are reported as inconclusive instead of
    # proof that the hostname is occupied.
    PROBE_STRICT_ERROR_STATUSES: bool = (
        os.environ.get("PROBE_STRICT_ERROR_STATUSES", "True").lower() == "true"
    )
