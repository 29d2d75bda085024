"""
Data model for test executions and the artifacts they leave behind.

A ``TestExecutionRecord`` is created when a browser test starts and is
consumed exactly once by the retention controller at teardown. The
helpers at the bottom build the deterministic artifact file names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

ARTIFACT_NAME_PATTERN = re.compile(
    r"^(?P<prefix>FAILED|DEBUG)_(?P<name>.+)_(?P<timestamp>\d{8}_\d{6})(?:_\d+)?\.(?P<ext>\w+)$"
)
VIDEO_EXTENSIONS = frozenset({"webm", "mp4"})


class TestOutcome(str, Enum):
    """Enumeration of test outcomes relevant to retention."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"


class ArtifactKind(str, Enum):
    """Enumeration of artifact kinds."""

    VIDEO = "video"
    SCREENSHOT = "screenshot"


class RecordState(str, Enum):
    """Lifecycle states of a test execution record."""

    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    FINALIZED = "finalized"


@dataclass
class TestExecutionRecord:
    """
    One execution of a browser test.

    Attributes:
        test_name: Test identifier (sanitized when building file names).
        started_at: When the test started; used in artifact file names.
        page: Browser page handle (screenshot/close capabilities).
        video: Optional video handle exposing ``path()``.
        outcome: Pass/fail outcome, set when the test completes.
        state: Current lifecycle state.
    """

    __test__ = False

    test_name: str
    started_at: datetime = field(default_factory=datetime.now)
    page: Any = None
    video: Any = None
    outcome: TestOutcome | None = None
    state: RecordState = RecordState.RUNNING

    @property
    def is_finalized(self) -> bool:
        return self.state is RecordState.FINALIZED

    def complete(self, outcome: TestOutcome) -> None:
        """
        Move the record from Running to Passed or Failed.

        Raises:
            ValueError: If the record is not running.
        """
        if self.state is not RecordState.RUNNING:
            raise ValueError(
                f"Cannot complete record for {self.test_name} in state {self.state.value}"
            )
        self.outcome = TestOutcome(outcome)
        self.state = RecordState(self.outcome.value)

    def mark_finalized(self) -> None:
        self.state = RecordState.FINALIZED


@dataclass(frozen=True)
class ArtifactFile:
    """A retained video or screenshot on disk."""

    kind: ArtifactKind
    path: Path
    test_name: str
    timestamp: datetime

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "path": str(self.path),
            "test_name": self.test_name,
            "timestamp": self.timestamp.isoformat(),
        }


def sanitize_test_name(name: str) -> str:
    """
    Make a test name safe to embed in a file name.

    Parametrize brackets become underscores, closing brackets are dropped,
    and path or node-id separators are flattened.
    """
    cleaned = name.replace("(", "_").replace(")", "")
    cleaned = cleaned.replace("[", "_").replace("]", "")
    for separator in ("::", "/", "\\", " "):
        cleaned = cleaned.replace(separator, "_")
    return cleaned


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def artifact_filename(
    prefix: str,
    test_name: str,
    timestamp: datetime,
    extension: str,
    label: str | None = None,
) -> str:
    """
    Build a deterministic artifact file name.

    Examples:
        FAILED_LoginTest_20250101_100000.webm
        DEBUG_LoginTest_after-submit_20250101_100000.png

    Args:
        prefix: Outcome prefix such as ``FAILED`` or ``DEBUG``.
        test_name: Raw test name; sanitized here.
        timestamp: Moment used for the name.
        extension: File extension, with or without the leading dot.
        label: Optional label inserted before the timestamp.

    Returns:
        File name without directory.
    """
    parts = [prefix, sanitize_test_name(test_name)]
    if label:
        parts.append(sanitize_test_name(label))
    parts.append(format_timestamp(timestamp))
    return f"{'_'.join(parts)}.{extension.lstrip('.')}"


def parse_artifact_filename(path: Path) -> ArtifactFile | None:
    """
    Recover an ``ArtifactFile`` from a retained file's name.

    For ``DEBUG_`` captures the returned test name still carries the label.

    Returns:
        The parsed artifact, or None when the name is not an artifact name.
    """
    match = ARTIFACT_NAME_PATTERN.match(path.name)
    if match is None:
        return None

    try:
        timestamp = datetime.strptime(match.group("timestamp"), TIMESTAMP_FORMAT)
    except ValueError:
        return None
    kind = (
        ArtifactKind.VIDEO
        if match.group("ext").lower() in VIDEO_EXTENSIONS
        else ArtifactKind.SCREENSHOT
    )
    return ArtifactFile(kind, path, match.group("name"), timestamp)
