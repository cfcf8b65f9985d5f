"""
HTTP API and HTML dashboard
"""

from .app import create_app

__all__ = ["create_app"]
