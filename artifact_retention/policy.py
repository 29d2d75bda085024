"""Retention policy: which artifacts to keep for a given test outcome."""

from __future__ import annotations

from dataclasses import dataclass

from artifact_retention.models import TestOutcome

FAILED_PREFIX = "FAILED"
DEBUG_PREFIX = "DEBUG"


@dataclass(frozen=True)
class RetentionAction:
    """
    What the controller should do with a finished test's artifacts.

    Attributes:
        keep_video: Retain the recorded video (otherwise delete it).
        capture_screenshot: Capture a screenshot of the final page state.
        prefix: File name prefix for retained artifacts.
    """

    keep_video: bool
    capture_screenshot: bool
    prefix: str = FAILED_PREFIX


KEEP_EVIDENCE = RetentionAction(keep_video=True, capture_screenshot=True)
DISCARD = RetentionAction(keep_video=False, capture_screenshot=False)


def decide(outcome: TestOutcome) -> RetentionAction:
    """
    Map a test outcome to a retention action.

    Failed tests keep their video and get a screenshot; passed tests keep
    nothing.
    """
    if TestOutcome(outcome) is TestOutcome.FAILED:
        return KEEP_EVIDENCE
    return DISCARD
