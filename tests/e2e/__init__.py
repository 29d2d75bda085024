"""
Browser test package for the demo site.

This package contains Playwright-based browser tests and demonstrates:
- Page Object Model (POM) pattern
- Video recording kept only for failed tests
- Per-group artifact folders
- Locator strategies using data-testid attributes
"""
