"""
Test Suite for Mermaid CLI
==========================

Test organization:
- unit/: Unit tests for individual components
- e2e/: End-to-end conversions with a real Chromium browser
- utils/: Test utilities and mocks
"""
