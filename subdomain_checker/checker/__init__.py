"""
Checker package for the subdomain availability checker.

Provides the HTTP transport, the probe classifier, and the request handler
that turns a raw subdomain into an available/taken answer.
"""
