"""
Unit tests for execution records and artifact naming.
"""

from datetime import datetime
from pathlib import Path

import pytest

from artifact_retention.models import (
    ArtifactKind,
    RecordState,
    TestExecutionRecord,
    TestOutcome,
    artifact_filename,
    parse_artifact_filename,
    sanitize_test_name,
)


pytestmark = pytest.mark.unit

MOMENT = datetime(2025, 1, 1, 10, 0, 0)


def test_failed_video_name_matches_pattern():
    assert artifact_filename("FAILED", "LoginTest", MOMENT, "webm") == (
        "FAILED_LoginTest_20250101_100000.webm"
    )


def test_extension_with_leading_dot_is_accepted():
    assert artifact_filename("FAILED", "LoginTest", MOMENT, ".png") == (
        "FAILED_LoginTest_20250101_100000.png"
    )


def test_debug_name_includes_label():
    name = artifact_filename("DEBUG", "LoginTest", MOMENT, "png", label="after submit")

    assert name == "DEBUG_LoginTest_after_submit_20250101_100000.png"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Search(headphones)", "Search_headphones"),
        ("test_search[chromium]", "test_search_chromium"),
        ("tests/e2e/test_x.py::test_y", "tests_e2e_test_x.py_test_y"),
        ("Fill Contact Form", "Fill_Contact_Form"),
    ],
)
def test_sanitize_test_name(raw, expected):
    assert sanitize_test_name(raw) == expected


def test_record_starts_running():
    record = TestExecutionRecord(test_name="HomeTest")

    assert record.state is RecordState.RUNNING
    assert record.outcome is None
    assert not record.is_finalized


def test_record_complete_sets_outcome_and_state():
    # Arrange
    record = TestExecutionRecord(test_name="HomeTest")

    # Act
    record.complete(TestOutcome.FAILED)

    # Assert
    assert record.outcome is TestOutcome.FAILED
    assert record.state is RecordState.FAILED


def test_record_complete_accepts_string_outcome():
    record = TestExecutionRecord(test_name="HomeTest")

    record.complete("passed")

    assert record.outcome is TestOutcome.PASSED


def test_record_cannot_complete_twice():
    record = TestExecutionRecord(test_name="HomeTest")
    record.complete(TestOutcome.PASSED)

    with pytest.raises(ValueError):
        record.complete(TestOutcome.FAILED)


def test_finalized_record_cannot_be_completed():
    record = TestExecutionRecord(test_name="HomeTest")
    record.complete(TestOutcome.PASSED)
    record.mark_finalized()

    assert record.is_finalized
    with pytest.raises(ValueError):
        record.complete(TestOutcome.PASSED)


def test_parse_failed_video_name():
    artifact = parse_artifact_filename(Path("/tmp/FAILED_LoginTest_20250101_100000.webm"))

    assert artifact is not None
    assert artifact.kind is ArtifactKind.VIDEO
    assert artifact.test_name == "LoginTest"
    assert artifact.timestamp == MOMENT


def test_parse_name_with_collision_suffix():
    artifact = parse_artifact_filename(Path("FAILED_Login_Test_20250101_100000_2.png"))

    assert artifact is not None
    assert artifact.kind is ArtifactKind.SCREENSHOT
    assert artifact.test_name == "Login_Test"


@pytest.mark.parametrize(
    "name",
    [
        "3f2a9c.webm",
        "FAILED_LoginTest.webm",
        "PASSED_LoginTest_20250101_100000.webm",
        "FAILED_odd_20251399_990000.webm",
    ],
)
def test_parse_rejects_non_artifact_names(name):
    assert parse_artifact_filename(Path(name)) is None


def test_artifact_to_dict():
    artifact = parse_artifact_filename(Path("FAILED_LoginTest_20250101_100000.webm"))

    data = artifact.to_dict()

    assert data["kind"] == "video"
    assert data["test_name"] == "LoginTest"
    assert data["timestamp"] == "2025-01-01T10:00:00"
