"""
Schema representation helpers, id generation, JSON encoding and Neo4j sources.
"""

from .schema import (
    DEFAULT_SAMPLE_SIZE,
    GRAPH_SCHEMA_REPRESENTATION_VERSION,
    map_type,
    node_type_key,
    sanitize,
)
from .serialization import GraphSchemaFormatError, dumps, from_document, loads, to_document
from .source import Neo4jSchemaSource, SchemaSource

__all__ = [
    "DEFAULT_SAMPLE_SIZE",
    "GRAPH_SCHEMA_REPRESENTATION_VERSION",
    "GraphSchemaFormatError",
    "Neo4jSchemaSource",
    "SchemaSource",
    "dumps",
    "from_document",
    "loads",
    "map_type",
    "node_type_key",
    "sanitize",
    "to_document",
]
