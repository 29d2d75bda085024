"""Helpers that locate a running demo site for the browser suites."""

from __future__ import annotations

import os
import time

import pytest
import requests


def is_site_ready(url: str, timeout: int = 2) -> bool:
    """Return True when the demo site's home page responds with 200."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException:
        return False
    return response.status_code == 200


def wait_for_site(url: str, timeout: int = 60, interval: int = 1) -> None:
    """Poll the demo site until ready or timeout."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_site_ready(url):
            return
        time.sleep(interval)
    raise RuntimeError(f"Demo site at {url} not reachable after {timeout}s")


def live_site_url(base_url: str, *, base_url_env: str = "TEST_BASE_URL", suite_name: str) -> str:
    """
    Return a reachable demo site URL or skip the calling suite.

    Priority:
    1. An explicit `base_url_env` is trusted: wait for it to come up.
    2. Otherwise probe `base_url` once and skip when nothing answers.
    """
    if os.getenv(base_url_env):
        wait_for_site(base_url)
        return base_url

    if is_site_ready(base_url):
        return base_url

    pytest.skip(
        f"demo site not reachable at {base_url}; set {base_url_env} to run {suite_name} tests"
    )
