"""
Inspect or clean artifacts retained by browser test runs.

After a test run, CI (or a developer) can list which tests left
``FAILED_`` evidence behind, or clean the artifact folders before a
fresh run.

Exit codes follow a three-state convention so that CI can distinguish
"failures were recorded" from "script crashed":

- ``0`` — no failure artifacts (or clean succeeded)
- ``1`` — at least one ``FAILED_`` artifact is present
- ``2`` — the script itself failed (bad config, unreadable directory)
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import defaultdict
from pathlib import Path

from artifact_retention import storage
from artifact_retention.config import RetentionConfig, load_config
from artifact_retention.models import ArtifactFile, parse_artifact_filename

EXIT_OK = 0
EXIT_FAILURES_RETAINED = 1
EXIT_SCRIPT_ERROR = 2

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the artifact tool."""
    parser = argparse.ArgumentParser(
        prog="artifact-retention",
        description="List or clean artifacts retained by browser tests.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to artifact retention YAML file (default: $ARTIFACT_CONFIG)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List retained artifacts grouped by test")
    subparsers.add_parser("clean", help="Delete retained FAILED_/DEBUG_ artifacts")
    return parser.parse_args(argv)


def find_artifacts(config: RetentionConfig) -> list[ArtifactFile]:
    """
    Collect retained artifacts from the configured folders.

    Args:
        config: Configuration naming the video and screenshot folders.

    Returns:
        Artifacts sorted by timestamp, then path.
    """
    artifacts: list[ArtifactFile] = []
    seen: set[Path] = set()
    for directory in (config.videos_dir, config.screenshots_dir):
        if directory in seen or not directory.is_dir():
            continue
        seen.add(directory)
        for path in directory.iterdir():
            if not path.is_file():
                continue
            artifact = parse_artifact_filename(path)
            if artifact is not None:
                artifacts.append(artifact)
    return sorted(artifacts, key=lambda item: (item.timestamp, str(item.path)))


def _print_listing(artifacts: list[ArtifactFile]) -> None:
    """Print artifacts grouped by test name."""
    if not artifacts:
        print("No retained artifacts.")
        return

    grouped: dict[str, list[ArtifactFile]] = defaultdict(list)
    for artifact in artifacts:
        grouped[artifact.test_name].append(artifact)

    for test_name in sorted(grouped):
        print(test_name)
        for artifact in grouped[test_name]:
            print(f"  {artifact.kind.value:<10} {artifact.path}")


def _clean(artifacts: list[ArtifactFile]) -> int:
    removed = 0
    for artifact in artifacts:
        result = storage.delete_file(artifact.path)
        if result:
            removed += 1
        else:
            logger.warning(result.message)
    return removed


def main(argv: list[str] | None = None) -> int:
    """Run the artifact tool."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)

    try:
        config = load_config(args.config)
        artifacts = find_artifacts(config)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_SCRIPT_ERROR

    if args.command == "clean":
        removed = _clean(artifacts)
        print(f"Removed {removed} of {len(artifacts)} retained artifacts.")
        return EXIT_OK

    _print_listing(artifacts)
    failed = [a for a in artifacts if a.path.name.startswith("FAILED_")]
    return EXIT_FAILURES_RETAINED if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
