"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Renderer, browser and logging settings
- logging: Structured logging configuration
"""
