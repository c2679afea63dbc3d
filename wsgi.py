"""
WSGI entry point for the subdomain availability checker.

WSGI hosts import this module and look for the ``app`` variable.  The
development server can also be started by running this file directly.

=============================================================================
DEPLOYMENT
=============================================================================

1. INSTALL
     pip install .

2. SET ENVIRONMENT VARIABLES
     SECRET_KEY=<a-long-random-string>
     PROBE_STRICT_ERROR_STATUSES=true   (optional; "false" reports 5xx
                                         responses as inconclusive)

   You can generate a SECRET_KEY with:
     python -c "import secrets; print(secrets.token_hex(32))"

3. SERVE
   Point your WSGI server at ``wsgi:app``.  The host must allow outbound
   HTTPS, since every check sends one HEAD request to the candidate
   hostname.

=============================================================================
LOCAL DEVELOPMENT
=============================================================================

Run the Flask development server with:

  export SECRET_KEY=dev-only-not-for-production
  python wsgi.py

The app will be available at http://127.0.0.1:5000/

For testing:

  pip install -e ".[test]"
  pytest tests/ -v
  pytest tests/ --cov=subdomain_checker --cov-report=term-missing

=============================================================================
"""

from __future__ import annotations

from subdomain_checker import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
