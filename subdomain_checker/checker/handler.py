"""
Request handler: raw user input in, available/taken answer out.

Normalizes the input, builds the candidate hostname, runs the probe
classifier, and collapses its tri-state verdict into a boolean.  Only an
explicit ``does_not_exist`` verdict is ever reported as available.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable

from subdomain_checker.checker.probe import (
    DEFAULT_TIMEOUT_SECONDS,
    ProbeOutcome,
    Verdict,
    classify,
)
from subdomain_checker.checker.transport import Deadline

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM_SUFFIX: str = "vercel.app"

EMPTY_INPUT_MESSAGE: str = "Please enter a domain"


@dataclass(frozen=True)
class AvailabilityResult:
    """Response contract returned to the caller."""

    available: bool
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def normalize_subdomain(raw: str | None) -> str:
    """Trim and lowercase *raw*.  Returns an empty string for blank input."""
    return (raw or "").strip().lower()


def build_hostname(label: str, suffix: str = DEFAULT_PLATFORM_SUFFIX) -> str:
    """Join a normalized label and the platform suffix."""
    return f"{label}.{suffix}"


def _collapse(hostname: str, outcome: ProbeOutcome) -> AvailabilityResult:
    if outcome.verdict is Verdict.DOES_NOT_EXIST:
        return AvailabilityResult(True, f"{hostname} is available!")
    return AvailabilityResult(False, f"{hostname} is already taken")


def check_subdomain(
    raw: str | None,
    *,
    suffix: str = DEFAULT_PLATFORM_SUFFIX,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    strict: bool = True,
    classifier: Callable[..., ProbeOutcome] = classify,
) -> AvailabilityResult:
    """Check whether ``{raw}.{suffix}`` is free.

    Args:
        raw: Subdomain label as typed by the user.
        suffix: Platform domain suffix.
        timeout: Probe budget in seconds; becomes the probe's deadline.
        strict: Passed through to the classifier.
        classifier: Probe function, replaceable in tests.

    Returns:
        An AvailabilityResult.  Blank input, timeouts and unexpected failures
        all yield ``available=False``.
    """
    label = normalize_subdomain(raw)
    if not label:
        return AvailabilityResult(False, EMPTY_INPUT_MESSAGE)

    hostname = build_hostname(label, suffix)

    try:
        outcome = classifier(hostname, Deadline.after(timeout), strict=strict)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Availability check failed: hostname=%r error=%s", hostname, exc)
        return AvailabilityResult(False, f"Unable to check {hostname}. Please try again")

    result = _collapse(hostname, outcome)
    logger.info(
        "Availability check: hostname=%s verdict=%s available=%s",
        hostname,
        outcome.verdict.value,
        result.available,
    )
    return result
