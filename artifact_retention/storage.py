"""
Best-effort filesystem and browser-session operations.

Every function here returns an ``OperationResult`` instead of raising for
expected failures, so the caller can log the outcome and carry on. A
failed copy, delete or capture must never fail the test that owns it.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from artifact_retention.results import ErrorKind, OperationResult

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> OperationResult:
    """
    Create a directory if it does not exist.

    Safe to call from several workers at once: an existing directory
    is a success.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return OperationResult.failure(
            ErrorKind.FILESYSTEM, f"Could not create directory {path}: {exc}", path
        )
    return OperationResult.success(path)


def unique_path(path: Path) -> Path:
    """
    Return ``path`` or, if it is taken, the first free ``<stem>_<n><suffix>``.

    Two runs of the same test within one second would otherwise map to
    the same deterministic name.
    """
    if not path.exists():
        return path
    counter = 2
    while True:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


def retain_file(source: Path, destination: Path) -> OperationResult:
    """
    Copy ``source`` to ``destination`` and remove the original.

    Copy-then-delete is used rather than a move because the recorder may
    still hold the source open. If only the cleanup of the original fails,
    the retained copy still counts as a success.

    Args:
        source: Speculatively recorded file.
        destination: Final retained location.

    Returns:
        Success carrying ``destination``, or a filesystem failure.
    """
    directory = ensure_directory(destination.parent)
    if not directory:
        return directory

    # A partial copy must never carry the final name
    partial = destination.with_name(f".{destination.name}.part")
    try:
        shutil.copyfile(source, partial)
        os.replace(partial, destination)
    except OSError as exc:
        try:
            partial.unlink(missing_ok=True)
        except OSError as cleanup_exc:
            logger.warning(f"Could not remove partial copy {partial}: {cleanup_exc}")
        return OperationResult.failure(
            ErrorKind.FILESYSTEM,
            f"Could not copy {source} to {destination}: {exc}",
            source,
        )

    try:
        source.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        return OperationResult.success(
            destination, f"Copied but could not remove original {source}: {exc}"
        )
    return OperationResult.success(destination)


def delete_file(path: Path) -> OperationResult:
    """Delete a file; a file that is already gone counts as deleted."""
    try:
        path.unlink()
    except FileNotFoundError:
        return OperationResult.success(path, "Already absent")
    except OSError as exc:
        return OperationResult.failure(
            ErrorKind.FILESYSTEM, f"Could not delete {path}: {exc}", path
        )
    return OperationResult.success(path)


def page_is_closed(page: Any) -> bool:
    """Return True when the page handle is missing or already closed."""
    if page is None:
        return True
    try:
        return bool(page.is_closed())
    except PlaywrightError:
        return True


def capture_screenshot(page: Any, path: Path, full_page: bool = False) -> OperationResult:
    """
    Capture a screenshot of ``page`` into ``path``.

    Args:
        page: Playwright page (or anything with ``screenshot``/``is_closed``).
        path: Target PNG file.
        full_page: Capture the whole scrollable page.

    Returns:
        Success carrying ``path``; ``session_unavailable`` when the page is
        closed; ``filesystem`` when the file could not be written.
    """
    if page_is_closed(page):
        return OperationResult.failure(
            ErrorKind.SESSION_UNAVAILABLE,
            "Page is closed; screenshot skipped",
            path,
        )

    directory = ensure_directory(path.parent)
    if not directory:
        return directory

    try:
        page.screenshot(path=str(path), full_page=full_page)
    except PlaywrightError as exc:
        return OperationResult.failure(
            ErrorKind.SESSION_UNAVAILABLE, f"Screenshot failed: {exc}", path
        )
    except OSError as exc:
        return OperationResult.failure(
            ErrorKind.FILESYSTEM, f"Could not write screenshot {path}: {exc}", path
        )
    return OperationResult.success(path)
