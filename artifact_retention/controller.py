"""
Artifact Retention Controller.

Runs once at the teardown of every browser test and applies the
retention policy: failed tests keep their video and get a screenshot,
passed tests have their speculative video deleted. Nothing in here is
allowed to fail the test; every degraded step is logged and skipped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from artifact_retention import storage
from artifact_retention.config import RetentionConfig
from artifact_retention.models import (
    ArtifactFile,
    ArtifactKind,
    TestExecutionRecord,
    TestOutcome,
    artifact_filename,
)
from artifact_retention.policy import DEBUG_PREFIX, RetentionAction, decide
from artifact_retention.results import ErrorKind, OperationResult

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_EXTENSION = ".webm"


class ArtifactRetentionController:
    """
    Applies the retention policy to finished test executions.

    Attributes:
        config: Injected artifact configuration.
    """

    def __init__(
        self,
        config: RetentionConfig,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the controller.

        Args:
            config: Where artifacts go and how long to wait for the recorder.
            clock: Source of the timestamp used in artifact names.
            sleep: Used for the grace delay; replaced in tests.
        """
        self.config = config
        self._clock = clock
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def finalize(self, record: TestExecutionRecord) -> list[ArtifactFile]:
        """
        Apply the retention policy to a finished test.

        Calling this again for an already finalized record does nothing.

        Args:
            record: Completed test execution.

        Returns:
            Artifacts retained for the test (empty for passed tests).
        """
        if record.is_finalized:
            logger.debug(f"Artifacts for {record.test_name} already finalized")
            return []

        retained: list[ArtifactFile] = []
        try:
            outcome = record.outcome
            if outcome is None:
                logger.warning(
                    f"No outcome recorded for {record.test_name}; treating it as failed"
                )
                outcome = TestOutcome.FAILED

            action = decide(outcome)
            timestamp = self._clock()

            if action.capture_screenshot:
                screenshot = self._capture_failure_screenshot(record, action, timestamp)
                if screenshot is not None:
                    retained.append(screenshot)

            video = self._handle_video(record, action, timestamp)
            if video is not None:
                retained.append(video)
        except Exception as exc:
            logger.warning(f"Failed to handle artifacts for {record.test_name}: {exc}")
        finally:
            record.mark_finalized()
        return retained

    def _capture_failure_screenshot(
        self, record: TestExecutionRecord, action: RetentionAction, timestamp: datetime
    ) -> ArtifactFile | None:
        """Capture the final page state of a failed test, if the page is still open."""
        filename = artifact_filename(action.prefix, record.test_name, timestamp, "png")
        path = storage.unique_path(self.config.screenshots_dir / filename)
        result = storage.capture_screenshot(record.page, path)
        if not result:
            self._log_degraded(record.test_name, result)
            return None

        logger.info(f"Test failed - screenshot saved to: {path}")
        return ArtifactFile(ArtifactKind.SCREENSHOT, path, record.test_name, timestamp)

    def _handle_video(
        self, record: TestExecutionRecord, action: RetentionAction, timestamp: datetime
    ) -> ArtifactFile | None:
        """Retain or discard the speculative video recorded for a test."""
        if record.video is None:
            logger.info(f"No video recording available for test: {record.test_name}")
            return None

        try:
            source = Path(record.video.path())
        except PlaywrightError as exc:
            self._log_degraded(
                record.test_name,
                OperationResult.failure(
                    ErrorKind.SESSION_UNAVAILABLE, f"Could not resolve video path: {exc}"
                ),
            )
            return None

        # The recorder only finishes writing once the page is closed
        self._close_page(record)
        if self.config.grace_delay:
            self._sleep(self.config.grace_delay)

        if not source.exists():
            self._log_degraded(
                record.test_name,
                OperationResult.failure(
                    ErrorKind.MISSING_ARTIFACT,
                    f"Video path was provided but file doesn't exist: {source}",
                    source,
                ),
            )
            return None

        if not action.keep_video:
            result = storage.delete_file(source)
            if result:
                logger.info(f"Test passed - video recording discarded: {record.test_name}")
            else:
                self._log_degraded(record.test_name, result)
            return None

        extension = source.suffix or DEFAULT_VIDEO_EXTENSION
        filename = artifact_filename(action.prefix, record.test_name, timestamp, extension)
        destination = storage.unique_path(self.config.videos_dir / filename)
        result = storage.retain_file(source, destination)
        if not result:
            self._log_degraded(record.test_name, result)
            return None
        if result.message:
            logger.warning(result.message)

        logger.info(f"Test failed - video recording saved to: {destination}")
        return ArtifactFile(ArtifactKind.VIDEO, destination, record.test_name, timestamp)

    def _close_page(self, record: TestExecutionRecord) -> None:
        if storage.page_is_closed(record.page):
            return
        try:
            record.page.close()
        except PlaywrightError as exc:
            logger.warning(f"Could not close page for {record.test_name}: {exc}")

    @staticmethod
    def _log_degraded(test_name: str, result: OperationResult) -> None:
        kind = result.error.value if result.error else "unknown"
        logger.warning(f"[{kind}] {test_name}: {result.message}")

    # -------------------------------------------------------------------------
    # Manual captures
    # -------------------------------------------------------------------------

    def capture_debug(self, page: Any, test_name: str, label: str) -> ArtifactFile | None:
        """
        Capture a full-page debug screenshot in the middle of a test.

        Args:
            page: Page to capture.
            test_name: Name of the running test.
            label: Short label describing the moment captured.

        Returns:
            The saved screenshot, or None when the capture failed.
        """
        timestamp = self._clock()
        filename = artifact_filename(DEBUG_PREFIX, test_name, timestamp, "png", label=label)
        path = storage.unique_path(self.config.screenshots_dir / filename)
        result = storage.capture_screenshot(page, path, full_page=True)
        if not result:
            self._log_degraded(test_name, result)
            return None

        logger.info(f"Debug screenshot saved to: {path}")
        return ArtifactFile(ArtifactKind.SCREENSHOT, path, test_name, timestamp)
