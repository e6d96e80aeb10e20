"""
Top-level package for the Project Tracker API.

This file makes ``project_tracker_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``project_tracker_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
