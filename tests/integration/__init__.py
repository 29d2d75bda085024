"""
Plugin integration tests.

These tests run small generated suites in-process with pytester and
check the artifacts each run leaves on disk.
"""
