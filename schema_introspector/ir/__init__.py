"""
Intermediate Representation (IR) models for the graph schema introspector.

The IR layer captures the raw rows read from a graph database and the schema
document assembled from them before it is rendered as JSON.
"""

from .models import (
    GraphSchema,
    NodeObjectType,
    NodePropertyRow,
    Property,
    Ref,
    RelationshipObjectType,
    RelationshipPropertyRow,
    Token,
    Type,
    iter_refs,
)

__all__ = [
    "GraphSchema",
    "NodeObjectType",
    "NodePropertyRow",
    "Property",
    "Ref",
    "RelationshipObjectType",
    "RelationshipPropertyRow",
    "Token",
    "Type",
    "iter_refs",
]
