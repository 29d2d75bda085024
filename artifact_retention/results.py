"""Result values returned by best-effort artifact operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    """Categories of degraded artifact operations."""

    FILESYSTEM = "filesystem"
    SESSION_UNAVAILABLE = "session_unavailable"
    MISSING_ARTIFACT = "missing_artifact"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a single filesystem or session operation.

    Attributes:
        ok: True when the operation achieved its goal.
        path: File the operation produced or acted on, if any.
        error: Error category when ``ok`` is False.
        message: Human readable detail for logging.
    """

    ok: bool
    path: Path | None = None
    error: ErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls, path: Path | None = None, message: str = "") -> "OperationResult":
        return cls(ok=True, path=path, message=message)

    @classmethod
    def failure(
        cls, error: ErrorKind, message: str, path: Path | None = None
    ) -> "OperationResult":
        return cls(ok=False, path=path, error=error, message=message)

    def __bool__(self) -> bool:
        return self.ok
