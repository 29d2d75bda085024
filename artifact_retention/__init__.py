"""
Pass/fail-conditional retention of browser test artifacts.

Videos are recorded for every test; the retention controller keeps them
(plus a screenshot) only for failed tests and deletes them otherwise.
The pytest plugin in :mod:`artifact_retention.plugin` wires this into
Playwright fixtures.
"""

from artifact_retention.config import RetentionConfig, load_config
from artifact_retention.controller import ArtifactRetentionController
from artifact_retention.models import (
    ArtifactFile,
    ArtifactKind,
    RecordState,
    TestExecutionRecord,
    TestOutcome,
)
from artifact_retention.policy import RetentionAction, decide
from artifact_retention.results import ErrorKind, OperationResult

__all__ = [
    "ArtifactFile",
    "ArtifactKind",
    "ArtifactRetentionController",
    "ErrorKind",
    "OperationResult",
    "RecordState",
    "RetentionAction",
    "RetentionConfig",
    "TestExecutionRecord",
    "TestOutcome",
    "decide",
    "load_config",
]

__version__ = "0.1.0"
