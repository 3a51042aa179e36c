"""
Rendering Module
===============

Local asset serving and browser automation for diagram capture.

Components:
- asset_server: Loopback HTTP server for the HTML shell and resources
- browser: Browser driver interface and its Playwright implementation
- orchestrator: Navigation, render detection and SVG/PNG extraction
"""
