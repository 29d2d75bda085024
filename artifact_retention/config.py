"""
Artifact retention configuration module.

This module defines the configuration value injected into each test
session. Values are loaded from environment variables (and an optional
YAML file) with sensible defaults, and per test group overrides produce
a new value instead of mutating shared state.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import date
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BASE_URL = "http://localhost:5275"
DEFAULT_VIDEOS_FOLDER = "videos"
DEFAULT_SCREENSHOTS_FOLDER = "screenshots"
DEFAULT_GRACE_DELAY = 2.0

# Environment variable names mapped to config fields
ENV_VARS = {
    "work_dir": "ARTIFACT_WORK_DIR",
    "videos_folder": "ARTIFACT_VIDEOS_DIR",
    "screenshots_folder": "ARTIFACT_SCREENSHOTS_DIR",
    "grace_delay": "ARTIFACT_GRACE_DELAY",
    "base_url": "TEST_BASE_URL",
}
CONFIG_FILE_ENV = "ARTIFACT_CONFIG"


@dataclass(frozen=True)
class RetentionConfig:
    """
    Where and how test artifacts are recorded and retained.

    Attributes:
        work_dir: Root directory that relative folders resolve against.
        videos_folder: Folder (relative or absolute) for retained videos.
        screenshots_folder: Folder (relative or absolute) for screenshots.
        grace_delay: Seconds to wait for the recorder to flush a video.
        video_width: Recorded video width in pixels.
        video_height: Recorded video height in pixels.
        base_url: Base URL of the application under test.
    """

    work_dir: Path = field(default_factory=Path.cwd)
    videos_folder: str = DEFAULT_VIDEOS_FOLDER
    screenshots_folder: str = DEFAULT_SCREENSHOTS_FOLDER
    grace_delay: float = DEFAULT_GRACE_DELAY
    video_width: int = 1280
    video_height: int = 720
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        object.__setattr__(self, "work_dir", Path(self.work_dir))
        if self.grace_delay < 0:
            raise ValueError(f"grace_delay must be >= 0, got {self.grace_delay}")

    @property
    def videos_dir(self) -> Path:
        """Resolved video directory (absolute folders ignore work_dir)."""
        return self.work_dir / self.videos_folder

    @property
    def screenshots_dir(self) -> Path:
        """Resolved screenshot directory (absolute folders ignore work_dir)."""
        return self.work_dir / self.screenshots_folder

    def with_folders(
        self, videos: str | None = None, screenshots: str | None = None
    ) -> "RetentionConfig":
        """
        Return a copy using different artifact folders.

        Args:
            videos: New videos folder, or None to keep the current one.
            screenshots: New screenshots folder, or None to keep the current one.

        Returns:
            New configuration value; this one is left untouched.
        """
        return replace(
            self,
            videos_folder=videos if videos is not None else self.videos_folder,
            screenshots_folder=(
                screenshots if screenshots is not None else self.screenshots_folder
            ),
        )

    def date_based(
        self, root: str = "test-results", day: date | None = None
    ) -> "RetentionConfig":
        """Return a copy that organises artifacts as <root>/<yyyy-mm-dd>/<kind>."""
        day_folder = (day or date.today()).strftime("%Y-%m-%d")
        return self.with_folders(
            videos=str(Path(root) / day_folder / "videos"),
            screenshots=str(Path(root) / day_folder / "screenshots"),
        )

    def context_options(self) -> dict[str, Any]:
        """Playwright ``new_context`` options that enable video recording."""
        return {
            "record_video_dir": str(self.videos_dir),
            "record_video_size": {
                "width": self.video_width,
                "height": self.video_height,
            },
        }


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw env/YAML value to the type of the named field."""
    if name == "work_dir":
        return Path(value)
    if name == "grace_delay":
        return float(value)
    if name in ("video_width", "video_height"):
        return int(value)
    return str(value)


def _load_yaml(path: Path) -> dict[str, Any]:
    """
    Read configuration overrides from a YAML file.

    Args:
        path: Path to a YAML mapping whose keys are config field names.

    Returns:
        Mapping of field name to raw value.

    Raises:
        ValueError: If the file is not a mapping or has unknown keys.
    """
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(RetentionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return data


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> RetentionConfig:
    """
    Build the configuration from a YAML file and environment variables.

    Args:
        path: Optional YAML file. If None, uses the ARTIFACT_CONFIG
              environment variable when set.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Configuration with environment variables taking precedence over
        the YAML file, and the YAML file over built-in defaults.

    Raises:
        ValueError: If the file or a value is invalid.
    """
    if environ is None:
        environ = os.environ

    if path is None:
        path = environ.get(CONFIG_FILE_ENV)

    values: dict[str, Any] = {}
    if path:
        values.update(_load_yaml(Path(path)))

    for name, env_name in ENV_VARS.items():
        raw = environ.get(env_name)
        if raw:
            values[name] = raw

    try:
        coerced = {name: _coerce(name, value) for name, value in values.items()}
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid artifact retention config: {exc}") from exc
    return RetentionConfig(**coerced)
