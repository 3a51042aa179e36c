"""
Core Business Logic
===================

Resource store construction, the render pipeline and image export.
"""
