"""
HTTP transport for availability probes.

Sends a single HEAD request to ``https://{hostname}`` and either returns the
raw status and headers or raises one member of a closed set of transport
errors.  Nothing in here decides what a response *means*; that is the job
of :mod:`subdomain_checker.checker.probe`.

Each probe gets its own single-worker executor so the caller's
:class:`Deadline` is a hard wall-clock limit, not just a per-socket timeout,
and a slow probe never holds up another request's probe.
"""

from __future__ import annotations

import logging
import socket
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass

import requests
from requests.structures import CaseInsensitiveDict
from urllib3.exceptions import LocationParseError, NameResolutionError
from urllib3.util import parse_url

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

# Probes must observe the live endpoint, never a cached copy.
_REQUEST_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "User-Agent": "subdomain-checker/1.0",
}

# Substrings that identify a name-resolution failure in an error message
# when no structured resolution error is reachable from the exception.
_RESOLUTION_FAILURE_MARKERS: tuple[str, ...] = (
    "getaddrinfo",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "failed to resolve",
    "no address associated with hostname",
)


# ---------------------------------------------------------------------------
# Cancellation token
# ---------------------------------------------------------------------------


class Deadline:
    """Absolute expiry for a probe, set by the caller.

    The transport derives every timeout it needs from :meth:`remaining`, so
    the caller decides the budget and the classifier never touches a timer.
    """

    def __init__(self, expires_at: float) -> None:
        self.expires_at = expires_at

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        """Return a deadline *seconds* from now."""
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"


# ---------------------------------------------------------------------------
# Results and errors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProbeResponse:
    """Status and headers of the probed endpoint."""

    status_code: int
    headers: CaseInsensitiveDict


class TransportError(Exception):
    """Base class for every failure the transport can report."""

    category: str = "error"


class ProbeTimeout(TransportError):
    """The deadline expired before a response arrived."""

    category = "timeout"


class ResolutionFailure(TransportError):
    """The hostname could not be resolved."""

    category = "resolution"


class NetworkFailure(TransportError):
    """The connection failed below HTTP (refused, reset, TLS handshake)."""

    category = "network"


class OtherTransportError(TransportError):
    """Any failure that fits none of the other categories."""

    category = "other"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


# ---------------------------------------------------------------------------
# URL construction
# ---------------------------------------------------------------------------


def _probe_url(hostname: str) -> str:
    """Return ``https://{hostname}``, refusing input that changes the host.

    A ``/``, ``?``, ``#``, ``@`` or ``:port`` inside *hostname* would make
    the request go to a different host than the one being checked.

    Raises:
        OtherTransportError: the URL does not parse to exactly *hostname*.
    """
    url = f"https://{hostname}"
    try:
        parsed = parse_url(url)
    except LocationParseError as exc:
        raise OtherTransportError(f"Invalid URL {url!r}: {exc}") from exc

    if (
        parsed.host != hostname
        or parsed.auth is not None
        or parsed.port is not None
        or parsed.path not in (None, "")
        or parsed.query is not None
        or parsed.fragment is not None
    ):
        raise OtherTransportError(f"Invalid URL {url!r}: host would be {parsed.host!r}")
    return url


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def _is_resolution_failure(exc: BaseException) -> bool:
    """Return True if *exc* wraps a DNS failure anywhere below it.

    requests raises ``ConnectionError(MaxRetryError(reason=NameResolutionError))``,
    so the walk follows ``__cause__``, ``__context__``, ``reason`` and
    exception args.
    """
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, (socket.gaierror, NameResolutionError)):
            return True
        linked = [current.__cause__, current.__context__, getattr(current, "reason", None)]
        linked.extend(current.args)
        pending.extend(item for item in linked if isinstance(item, BaseException))

    message = str(exc).lower()
    return any(marker in message for marker in _RESOLUTION_FAILURE_MARKERS)


def _map_exception(exc: Exception) -> TransportError:
    """Translate a ``requests`` (or IDNA/URL) exception into a TransportError."""
    if isinstance(exc, TransportError):
        return exc
    # ConnectTimeout is both a Timeout and a ConnectionError; timeout wins.
    if isinstance(exc, requests.Timeout):
        return ProbeTimeout("timeout")
    if isinstance(exc, requests.ConnectionError):
        if _is_resolution_failure(exc):
            return ResolutionFailure(str(exc))
        return NetworkFailure(str(exc))
    return OtherTransportError(str(exc) or type(exc).__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _send_head(url: str, deadline: Deadline) -> ProbeResponse:
    # Socket timeout is taken when the worker starts, not when it was queued.
    timeout = deadline.remaining()
    if timeout <= 0.0:
        raise ProbeTimeout("timeout")

    response = requests.head(
        url,
        headers=_REQUEST_HEADERS,
        allow_redirects=False,
        timeout=timeout,
    )
    try:
        return ProbeResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
        )
    finally:
        response.close()


def head(hostname: str, deadline: Deadline) -> ProbeResponse:
    """Send one HEAD request to ``https://{hostname}`` within *deadline*.

    Redirects are not followed: a 3xx response is returned as-is.

    Raises:
        ProbeTimeout: the deadline expired, either before sending, inside
            ``requests``, or while waiting on the worker thread.
        ResolutionFailure: the hostname does not resolve.
        NetworkFailure: the connection failed for another network reason.
        OtherTransportError: anything else, e.g. an input that is not a
            plain hostname.
    """
    if deadline.expired:
        raise ProbeTimeout("timeout")

    url = _probe_url(hostname)

    # One worker per probe; an abandoned request finishes on its own thread
    # once its socket timeout fires.
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="probe")
    try:
        future = executor.submit(_send_head, url, deadline)
        return future.result(timeout=deadline.remaining())
    except FuturesTimeoutError:
        logger.debug("HEAD %s exceeded its deadline", url)
        raise ProbeTimeout("timeout") from None
    except Exception as exc:  # noqa: BLE001
        mapped = _map_exception(exc)
        if mapped is exc:
            raise
        logger.debug("HEAD %s failed: %s -> %s", url, type(exc).__name__, mapped.category)
        raise mapped from exc
    finally:
        executor.shutdown(wait=False)
