"""
Schema sources feeding the introspection pipeline.

A source only delivers raw rows; all id assignment and aggregation happens in
`schema_introspector.pipeline`. Streams returned by a source may hold an open
database session and must be closed by the consumer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

from neo4j import Driver, GraphDatabase, Session

from schema_introspector.config import Neo4jSettings
from schema_introspector.ir import NodePropertyRow, RelationshipPropertyRow

logger = logging.getLogger(__name__)

NODE_LABELS_QUERY = "CALL db.labels() YIELD label RETURN label"

RELATIONSHIP_TYPES_QUERY = "CALL db.relationshipTypes() YIELD relationshipType RETURN relationshipType"

# language=cypher
NODE_PROPERTIES_QUERY = """\
CALL db.schema.nodeTypeProperties()
YIELD nodeType, nodeLabels, propertyName, propertyTypes, mandatory
RETURN *
ORDER BY nodeType ASC, propertyName ASC
"""


def relationship_properties_query(sample_size: Optional[int]) -> str:
    """
    Build the query listing relationship properties per (from, to) label pair.

    With a sample size, only that many relationships per type and property are
    inspected to find the label pairs; without one, all relationships are scanned.
    """

    limit = f"LIMIT {sample_size}" if sample_size is not None else "// LIMIT"
    return f"""\
CALL db.schema.relTypeProperties() YIELD relType, propertyName, propertyTypes, mandatory
WITH replace(substring(relType, 2, size(relType)-3), "``", "`") AS relType, propertyName, propertyTypes, mandatory
CALL {{
	WITH relType, propertyName
	MATCH (n)-[r]->(m) WHERE type(r) = relType AND (r[propertyName] IS NOT NULL OR propertyName IS NULL)
	WITH n, r, m
	{limit}
	WITH DISTINCT labels(n) AS from, labels(m) AS to
	RETURN from, to
}}
RETURN DISTINCT from, to, relType, propertyName, propertyTypes, mandatory
ORDER BY relType ASC, from ASC, to ASC, propertyName ASC
"""


class SchemaSource(ABC):
    """Interface for anything that can report the structure of a property graph."""

    @abstractmethod
    def node_labels(self) -> Iterator[str]:
        """Yield every node label in use."""

    @abstractmethod
    def relationship_types(self) -> Iterator[str]:
        """Yield every relationship type in use."""

    @abstractmethod
    def node_property_rows(self) -> Iterator[NodePropertyRow]:
        """Yield node type property rows ordered by node type, then property name."""

    @abstractmethod
    def relationship_property_rows(self, sample_size: Optional[int]) -> Iterator[RelationshipPropertyRow]:
        """Yield relationship property rows ordered by relationship type, then from and to labels."""


@dataclass
class Neo4jSchemaSource(SchemaSource):
    """Reads schema rows from a Neo4j database using the built-in schema procedures."""

    settings: Neo4jSettings
    driver: Driver | None = None

    def __post_init__(self) -> None:
        self._owns_driver = self.driver is None
        if self.driver is None:
            auth = (self.settings.username, self.settings.password)
            self.driver = GraphDatabase.driver(self.settings.uri, auth=auth)

    def close(self) -> None:
        if self.driver and self._owns_driver:
            self.driver.close()

    def _session(self) -> Session:
        if not self.driver:
            raise RuntimeError("Neo4j driver is not initialized")
        return self.driver.session(database=self.settings.database)

    # Streams ----------------------------------------------------------------------
    def node_labels(self) -> Iterator[str]:
        with self._session() as session:
            for record in session.run(NODE_LABELS_QUERY):
                yield record["label"]

    def relationship_types(self) -> Iterator[str]:
        with self._session() as session:
            for record in session.run(RELATIONSHIP_TYPES_QUERY):
                yield record["relationshipType"]

    def node_property_rows(self) -> Iterator[NodePropertyRow]:
        with self._session() as session:
            for record in session.run(NODE_PROPERTIES_QUERY):
                yield NodePropertyRow(
                    node_type=record["nodeType"],
                    node_labels=tuple(record["nodeLabels"] or ()),
                    property_name=record["propertyName"],
                    property_types=tuple(record["propertyTypes"] or ()),
                    mandatory=bool(record["mandatory"]),
                )

    def relationship_property_rows(self, sample_size: Optional[int]) -> Iterator[RelationshipPropertyRow]:
        query = relationship_properties_query(sample_size)
        logger.debug("Scanning relationship properties (sample size: %s)", sample_size)
        with self._session() as session:
            for record in session.run(query):
                yield RelationshipPropertyRow(
                    rel_type=record["relType"],
                    from_labels=tuple(record["from"] or ()),
                    to_labels=tuple(record["to"] or ()),
                    property_name=record["propertyName"],
                    property_types=tuple(record["propertyTypes"] or ()),
                    mandatory=bool(record["mandatory"]),
                )
