"""
Configuration utilities for the graph schema introspector.
"""

from .settings import (
    IntrospectionConfig,
    InvalidConfigurationError,
    Neo4jSettings,
    load_settings,
)

__all__ = [
    "IntrospectionConfig",
    "InvalidConfigurationError",
    "Neo4jSettings",
    "load_settings",
]
