"""
HTTP layer for the AS claim tracker (FastAPI application factory).
"""

from as_tracker.api.app import create_app

__all__ = ["create_app"]
