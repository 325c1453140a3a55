"""
Introspection pipeline turning schema rows into a graph schema document.
"""

from .aggregate import NodeAggregator, RelationshipAggregator
from .introspect import Introspector, introspect
from .tokens import build_catalog

__all__ = [
    "Introspector",
    "NodeAggregator",
    "RelationshipAggregator",
    "build_catalog",
    "introspect",
]
