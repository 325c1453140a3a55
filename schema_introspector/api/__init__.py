"""
HTTP surface of the graph schema introspector.
"""

from .server import create_app

__all__ = ["create_app"]
