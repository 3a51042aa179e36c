"""
Mermaid CLI
===========

Convert Mermaid diagram definitions into PNG or SVG images without external
network access.

This package provides:
- An in-memory resource store for the diagram and its rendering assets
- A loopback-only asset server exposing those resources to the browser
- Browser automation with Playwright for render detection and capture
- A command line interface writing the captured image to disk
"""

__version__ = "1.0.0"
__author__ = "Mermaid CLI Team"
