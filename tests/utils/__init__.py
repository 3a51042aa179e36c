"""
Test Utilities
==============

Shared mocks for the test suite.
"""
