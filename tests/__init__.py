"""
Test suite for the artifact retention plugin.

This package contains:
- unit/: Retention policy, controller, storage, config and CLI tests
- integration/: Plugin tests run through pytester with a fake browser
- e2e/: Browser tests against the demo site using recorded pages
"""
