"""
Pytest plugin wiring the retention controller into browser tests.

Tests that request ``recorded_page`` get a Playwright page whose context
records video speculatively. At teardown the page's record is completed
with the test's pass/fail outcome and handed to the controller exactly
once: failed tests keep a ``FAILED_`` video and screenshot, passed tests
keep nothing.

Key Concepts Demonstrated:
- Making phase reports available to fixtures at teardown
- Injected configuration overridable per test group (fixture or marker)
- Best-effort teardown that never changes a test's result
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from typing import Any

import pytest
from playwright.sync_api import Error as PlaywrightError

from artifact_retention import storage
from artifact_retention.config import RetentionConfig, load_config
from artifact_retention.controller import ArtifactRetentionController
from artifact_retention.models import ArtifactFile, TestExecutionRecord, TestOutcome

logger = logging.getLogger(__name__)

PHASE_REPORTS_KEY = pytest.StashKey[dict]()
RECORD_KEY = pytest.StashKey[TestExecutionRecord]()
RETAINED_KEY = pytest.StashKey[list]()

MARKER_NAME = "artifact_retention"


# -----------------------------------------------------------------------------
# Hooks
# -----------------------------------------------------------------------------

def pytest_addoption(parser):
    group = parser.getgroup("artifact-retention", "browser test artifact retention")
    group.addoption(
        "--artifact-config",
        action="store",
        default=None,
        help="YAML file with artifact retention settings (default: $ARTIFACT_CONFIG)",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        f"{MARKER_NAME}(videos=None, screenshots=None, date_based=False): "
        "override artifact folders for a test or group",
    )
    config.stash[RETAINED_KEY] = []


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Keep each phase report on the item so fixtures can read the outcome."""
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(PHASE_REPORTS_KEY, {})[report.when] = report


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    retained: list[ArtifactFile] = config.stash.get(RETAINED_KEY, [])
    if not retained:
        return
    terminalreporter.section("retained test artifacts")
    for artifact in retained:
        terminalreporter.write_line(
            f"{artifact.kind.value}: {artifact.path} ({artifact.test_name})"
        )


def outcome_for(item: pytest.Item) -> TestOutcome:
    """
    Determine the retention outcome of a test from its phase reports.

    A failure in setup or call makes the test Failed; anything else,
    including a skip, is Passed.
    """
    reports = item.stash.get(PHASE_REPORTS_KEY, {})
    for when in ("setup", "call"):
        report = reports.get(when)
        if report is not None and report.failed:
            return TestOutcome.FAILED
    return TestOutcome.PASSED


def _apply_marker(item: pytest.Item, config: RetentionConfig) -> RetentionConfig:
    """Apply the closest ``artifact_retention`` marker to the configuration."""
    marker = item.get_closest_marker(MARKER_NAME)
    if marker is None:
        return config

    if marker.kwargs.get("date_based"):
        config = config.date_based()
    return config.with_folders(
        videos=marker.kwargs.get("videos"),
        screenshots=marker.kwargs.get("screenshots"),
    )


# -----------------------------------------------------------------------------
# Configuration Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def artifact_config(pytestconfig) -> RetentionConfig:
    """
    Artifact configuration for the session.

    Override this fixture in a module or class conftest to give a test
    group its own folders.
    """
    try:
        return load_config(pytestconfig.getoption("artifact_config"))
    except (OSError, ValueError) as exc:
        raise pytest.UsageError(f"Invalid artifact retention config: {exc}") from exc


@pytest.fixture
def retention_controller(request, artifact_config: RetentionConfig) -> ArtifactRetentionController:
    """Controller bound to the configuration of the requesting test."""
    return ArtifactRetentionController(_apply_marker(request.node, artifact_config))


# -----------------------------------------------------------------------------
# Browser Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def recorded_context(
    browser, browser_context_args: dict, retention_controller: ArtifactRetentionController
) -> Generator[Any, None, None]:
    """
    Fresh browser context that records video for every page.

    Args:
        browser: Playwright browser instance.
        browser_context_args: Base context configuration.
        retention_controller: Supplies the video directory and size.

    Yields:
        BrowserContext: Context with video recording enabled.
    """
    config = retention_controller.config
    result = storage.ensure_directory(config.videos_dir)
    if not result:
        logger.warning(result.message)

    context = browser.new_context(**{**browser_context_args, **config.context_options()})
    yield context
    try:
        context.close()
    except PlaywrightError as exc:
        logger.warning(f"Could not close browser context: {exc}")


@pytest.fixture
def recorded_page(
    request,
    recorded_context,
    retention_controller: ArtifactRetentionController,
) -> Generator[Any, None, None]:
    """
    Page whose artifacts are retained or discarded at teardown.

    Yields:
        Page: Playwright page with video recording.
    """
    page = recorded_context.new_page()
    record = TestExecutionRecord(test_name=request.node.name, page=page, video=page.video)
    request.node.stash[RECORD_KEY] = record

    yield page

    record.complete(outcome_for(request.node))
    retained = retention_controller.finalize(record)
    request.config.stash.setdefault(RETAINED_KEY, []).extend(retained)

    if not storage.page_is_closed(page):
        try:
            page.close()
        except PlaywrightError as exc:
            logger.warning(f"Could not close page for {record.test_name}: {exc}")


# -----------------------------------------------------------------------------
# Helper Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def navigate(recorded_page, retention_controller: ArtifactRetentionController) -> Callable[[str], Any]:
    """Navigate the recorded page to a path relative to the configured base URL."""
    base_url = retention_controller.config.base_url.rstrip("/")

    def _navigate(relative_path: str = "") -> Any:
        url = f"{base_url}/{relative_path.lstrip('/')}".rstrip("/")
        return recorded_page.goto(url)

    return _navigate


@pytest.fixture
def debug_screenshot(
    request, recorded_page, retention_controller: ArtifactRetentionController
) -> Callable[[str], ArtifactFile | None]:
    """
    Capture a ``DEBUG_`` screenshot of the recorded page mid-test.

    Example:
        def test_checkout(recorded_page, debug_screenshot):
            ...
            debug_screenshot("before-submit")
    """

    def _capture(label: str) -> ArtifactFile | None:
        artifact = retention_controller.capture_debug(recorded_page, request.node.name, label)
        if artifact is not None:
            request.config.stash.setdefault(RETAINED_KEY, []).append(artifact)
        return artifact

    return _capture
