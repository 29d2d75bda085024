"""
Shared pytest fixtures for the artifact retention test suite.

Fixtures here build the retention configuration and controller against
a temporary work directory, with a frozen clock and a no-op grace delay,
so tests can assert on exact artifact file names.

Key Concepts Demonstrated:
- Injecting time and sleep for deterministic tests
- Factory fixtures for fake browser pages
- tmp_path isolation for filesystem side effects
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from artifact_retention.config import RetentionConfig
from artifact_retention.controller import ArtifactRetentionController
from artifact_retention.models import TestExecutionRecord, TestOutcome
from shared.test_helpers import FakePage, FakeVideo

FIXED_NOW = datetime(2025, 1, 1, 10, 0, 0)


@pytest.fixture
def retention_config(tmp_path: Path) -> RetentionConfig:
    """Configuration rooted in a per-test temporary directory."""
    return RetentionConfig(work_dir=tmp_path, grace_delay=0)


@pytest.fixture
def sleep_calls() -> list[float]:
    return []


@pytest.fixture
def controller(
    retention_config: RetentionConfig, sleep_calls: list[float]
) -> ArtifactRetentionController:
    """Controller with a frozen clock and a recorded, non-blocking sleep."""
    return ArtifactRetentionController(
        retention_config,
        clock=lambda: FIXED_NOW,
        sleep=sleep_calls.append,
    )


@pytest.fixture
def speculative_dir(tmp_path: Path) -> Path:
    """Directory where the fake recorder writes videos before retention."""
    directory = tmp_path / "recording"
    directory.mkdir()
    return directory


@pytest.fixture
def record_factory(speculative_dir: Path) -> Callable[..., TestExecutionRecord]:
    """
    Factory fixture for completed test execution records.

    Example:
        def test_something(record_factory):
            record = record_factory("LoginTest", TestOutcome.FAILED)
    """

    def _make(
        test_name: str = "LoginTest",
        outcome: TestOutcome | None = TestOutcome.FAILED,
        with_video: bool = True,
        write_video: bool = True,
        page: FakePage | None = None,
    ) -> TestExecutionRecord:
        video = None
        if with_video:
            video = FakeVideo(speculative_dir / f"{test_name}-raw.webm", write=write_video)
        if page is None:
            page = FakePage(video=video)
        record = TestExecutionRecord(test_name=test_name, page=page, video=video)
        if outcome is not None:
            record.complete(outcome)
        return record

    return _make
