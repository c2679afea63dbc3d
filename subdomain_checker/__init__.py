"""
Flask application factory for the subdomain availability checker.

Creates and configures the Flask application, registers the web and API
blueprints, and initialises CSRF protection (Flask-WTF).
"""

from __future__ import annotations

import logging
import sys

from flask import Flask, Response
from flask_wtf.csrf import CSRFProtect

from subdomain_checker.config import Config

# ---------------------------------------------------------------------------
# Extension instances (created here, initialised in create_app)
# ---------------------------------------------------------------------------
csrf: CSRFProtect = CSRFProtect()


def _configure_logging(debug: bool) -> None:
    """Configure root logger for the application.

    Logging is sent to stdout so most WSGI hosts capture it automatically
    without requiring file handlers.

    Format: timestamp  level  logger-name  message

    Args:
        debug: When True, sets the root level to DEBUG.  Otherwise INFO.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
    )

    root_logger = logging.getLogger()
    # create_app() runs once per test; keep a single handler.
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def create_app(config_object: object = Config) -> Flask:
    """Application factory.

    Args:
        config_object: Configuration class or object to load settings from.

    Returns:
        A fully configured Flask application instance.
    """
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(config_object)

    _configure_logging(debug=app.debug)

    csrf.init_app(app)

    # ------------------------------------------------------------------
    # Register blueprints
    # ------------------------------------------------------------------
    from subdomain_checker.api import bp as api_bp
    from subdomain_checker.web import bp as web_bp

    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp)

    # JSON endpoint is called by scripts and fetch(), not by our form
    csrf.exempt(api_bp)

    # ------------------------------------------------------------------
    # Security headers, applied to every response
    # ------------------------------------------------------------------

    @app.after_request
    def set_security_headers(response: Response) -> Response:
        """Attach security-related HTTP response headers.

        Headers applied:
        - X-Content-Type-Options: Prevents MIME-type sniffing.
        - X-Frame-Options: Blocks clickjacking by forbidding iframe embedding.
        - X-XSS-Protection: Legacy XSS filter hint for older browsers.
        - Content-Security-Policy: Only same-origin resources are loaded.
        """
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        return response

    return app
