"""
Data Models
===========

Pydantic models shared by the render pipeline.
"""
