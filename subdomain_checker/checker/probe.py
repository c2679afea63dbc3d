"""
Availability probe classifier.

Issues one HEAD request through :mod:`subdomain_checker.checker.transport`
and turns whatever happens into a tri-state verdict:

- ``exists``: something answered for the hostname, or the platform says
  the hostname is bound but unhealthy.
- ``does_not_exist``: the platform explicitly reported that no deployment
  is bound, or the hostname failed at the network layer.
- ``inconclusive``: the probe timed out or failed in an unexpected way.

Absence has to be proven.  Any error status other than the platform's
"deployment not found" 404 counts as occupied.

The policy lives in two ordered tables (``RESPONSE_RULES`` and
``ERROR_RULES``) evaluated top to bottom; the first matching row wins.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

from subdomain_checker.checker import transport
from subdomain_checker.checker.transport import (
    Deadline,
    NetworkFailure,
    OtherTransportError,
    ProbeResponse,
    ProbeTimeout,
    ResolutionFailure,
    TransportError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Platform constants
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_SECONDS: float = 3.0

PLATFORM_NAME: str = "vercel"
PLATFORM_ERROR_HEADER: str = "x-vercel-error"
DEPLOYMENT_NOT_FOUND: str = "DEPLOYMENT_NOT_FOUND"

TIMEOUT_SIGNAL: str = "timeout"
DNS_NOT_FOUND_SIGNAL: str = "DNS not found"


class Verdict(str, enum.Enum):
    """Tri-state judgment about a candidate hostname."""

    EXISTS = "exists"
    DOES_NOT_EXIST = "does_not_exist"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one probe.  ``signal`` is diagnostic only."""

    verdict: Verdict
    signal: str | None = None


# ---------------------------------------------------------------------------
# Response decision table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResponseRule:
    """One row of the response table."""

    name: str
    matches: Callable[[ProbeResponse, bool], bool]
    verdict: Verdict
    signal: Callable[[ProbeResponse], str | None]


def _status(resp: ProbeResponse) -> str:
    return str(resp.status_code)


def _platform_error(resp: ProbeResponse) -> str | None:
    return resp.headers.get(PLATFORM_ERROR_HEADER)


def _served_by_platform(resp: ProbeResponse) -> bool:
    return PLATFORM_NAME in (resp.headers.get("server") or "").lower()


RESPONSE_RULES: tuple[ResponseRule, ...] = (
    ResponseRule(
        name="success",
        matches=lambda r, strict: r.status_code < 400,
        verdict=Verdict.EXISTS,
        signal=_status,
    ),
    ResponseRule(
        name="deployment_not_found",
        matches=lambda r, strict: (
            r.status_code == 404 and _platform_error(r) == DEPLOYMENT_NOT_FOUND
        ),
        verdict=Verdict.DOES_NOT_EXIST,
        signal=_platform_error,
    ),
    ResponseRule(
        name="platform_404",
        matches=lambda r, strict: r.status_code == 404 and _served_by_platform(r),
        verdict=Verdict.EXISTS,
        signal=lambda r: _platform_error(r) or "unknown",
    ),
    ResponseRule(
        name="lenient_server_error",
        matches=lambda r, strict: not strict and r.status_code >= 500,
        verdict=Verdict.INCONCLUSIVE,
        signal=_status,
    ),
    ResponseRule(
        name="error_status",
        matches=lambda r, strict: r.status_code >= 400,
        verdict=Verdict.EXISTS,
        signal=_status,
    ),
)

_UNMATCHED_RESPONSE = ProbeOutcome(Verdict.DOES_NOT_EXIST)


def classify_response(response: ProbeResponse, strict: bool = True) -> ProbeOutcome:
    """Apply ``RESPONSE_RULES`` to *response*."""
    for rule in RESPONSE_RULES:
        if rule.matches(response, strict):
            logger.debug("Response %d matched rule %s", response.status_code, rule.name)
            return ProbeOutcome(rule.verdict, rule.signal(response))
    return _UNMATCHED_RESPONSE


# ---------------------------------------------------------------------------
# Transport error table
# ---------------------------------------------------------------------------


ERROR_RULES: tuple[tuple[type[TransportError], Verdict, Callable[[TransportError], str]], ...] = (
    (ResolutionFailure, Verdict.DOES_NOT_EXIST, lambda e: DNS_NOT_FOUND_SIGNAL),
    (NetworkFailure, Verdict.DOES_NOT_EXIST, lambda e: DNS_NOT_FOUND_SIGNAL),
    (ProbeTimeout, Verdict.INCONCLUSIVE, lambda e: TIMEOUT_SIGNAL),
    (OtherTransportError, Verdict.INCONCLUSIVE, lambda e: e.detail),
)


def classify_error(error: TransportError) -> ProbeOutcome:
    """Apply ``ERROR_RULES`` to a transport error."""
    for error_type, verdict, signal in ERROR_RULES:
        if isinstance(error, error_type):
            return ProbeOutcome(verdict, signal(error))
    return ProbeOutcome(Verdict.INCONCLUSIVE, str(error) or type(error).__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify(
    hostname: str,
    deadline: Deadline | None = None,
    *,
    strict: bool = True,
) -> ProbeOutcome:
    """Probe *hostname* once and classify the outcome.

    Never raises: every failure path resolves to a :class:`ProbeOutcome`.

    Args:
        hostname: Fully-qualified candidate hostname (e.g. "myapp.vercel.app").
        deadline: Cancellation token bounding the probe.  Defaults to
            ``DEFAULT_TIMEOUT_SECONDS`` from now.
        strict: When False, 5xx responses are inconclusive rather than
            proof of existence.

    Returns:
        The verdict plus the status, header value, or error category that
        produced it.
    """
    if deadline is None:
        deadline = Deadline.after(DEFAULT_TIMEOUT_SECONDS)

    try:
        response = transport.head(hostname, deadline)
    except TransportError as exc:
        outcome = classify_error(exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected probe failure for %s", hostname)
        outcome = ProbeOutcome(Verdict.INCONCLUSIVE, str(exc) or type(exc).__name__)
    else:
        outcome = classify_response(response, strict=strict)

    logger.info(
        "Probe %s: verdict=%s signal=%s",
        hostname,
        outcome.verdict.value,
        outcome.signal,
    )
    return outcome
