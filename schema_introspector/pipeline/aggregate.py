"""
Aggregation of property rows into node and relationship object types.

Both aggregators keep per-call state (created entities, memoized ids) and must
be constructed fresh for every introspection.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence

from schema_introspector.graph.schema import map_type, node_type_key
from schema_introspector.ir import (
    NodeObjectType,
    NodePropertyRow,
    Property,
    Ref,
    RelationshipObjectType,
    RelationshipPropertyRow,
    Token,
)
from schema_introspector.pipeline.tokens import release

logger = logging.getLogger(__name__)


def extract_property(
    property_name: Optional[str],
    property_types: Sequence[str],
    mandatory: bool,
) -> Optional[Property]:
    """Build the property of a row, or None for rows that carry no property."""

    if property_name is None:
        return None
    types = tuple(map_type(raw_type) for raw_type in property_types)
    return Property(token=property_name, types=types, mandatory=mandatory)


def _lookup_token(tokens: Mapping[str, Token], name: str, kind: str) -> Token:
    token = tokens.get(name)
    if token is None:
        raise LookupError(f"Unknown {kind} {name!r}")
    return token


class NodeAggregator:
    """
    Groups node property rows into node object types.

    Every row appends its property to the object type of its node type; rows
    sharing a property name are not merged.
    """

    def __init__(self, label_tokens: Mapping[str, Token], id_function: Callable[[str], str]) -> None:
        self._label_tokens = label_tokens
        self._id_function = id_function
        self.node_object_types: Dict[str, NodeObjectType] = {}

    def resolve(self, node_type: str, labels: Iterable[str]) -> NodeObjectType:
        """Return the object type for `node_type`, creating it on first sight."""

        node_id = self._id_function(node_type)
        node_object = self.node_object_types.get(node_id)
        if node_object is None:
            refs = [
                Ref(_lookup_token(self._label_tokens, label, "node label").id)
                for label in sorted(labels)
            ]
            node_object = NodeObjectType(id=node_id, labels=refs)
            self.node_object_types[node_id] = node_object
        return node_object

    def add(self, row: NodePropertyRow) -> None:
        node_object = self.resolve(row.node_type, row.node_labels)
        prop = extract_property(row.property_name, row.property_types, row.mandatory)
        if prop is not None:
            node_object.properties.append(prop)

    def consume(self, rows: Iterable[NodePropertyRow]) -> Dict[str, NodeObjectType]:
        try:
            for row in rows:
                self.add(row)
        finally:
            release(rows)
        logger.debug("Aggregated %d node object types", len(self.node_object_types))
        return self.node_object_types


class RelationshipAggregator:
    """
    Groups relationship property rows into relationship object types.

    Endpoints are resolved through the node aggregator so that relationships
    always point at node object types of the same document.
    """

    def __init__(
        self,
        relationship_tokens: Mapping[str, Token],
        nodes: NodeAggregator,
        id_function: Callable[[str, str], str],
    ) -> None:
        self._relationship_tokens = relationship_tokens
        self._nodes = nodes
        self._id_function = id_function
        self.relationship_object_types: Dict[str, RelationshipObjectType] = {}

    def add(self, row: RelationshipPropertyRow) -> None:
        from_object = self._nodes.resolve(node_type_key(row.from_labels), row.from_labels)
        to_object = self._nodes.resolve(node_type_key(row.to_labels), row.to_labels)

        rel_id = self._id_function(row.rel_type, to_object.id)
        rel_object = self.relationship_object_types.get(rel_id)
        if rel_object is None:
            token = _lookup_token(self._relationship_tokens, row.rel_type, "relationship type")
            rel_object = RelationshipObjectType(
                id=rel_id,
                type=Ref(token.id),
                from_=Ref(from_object.id),
                to=Ref(to_object.id),
            )
            self.relationship_object_types[rel_id] = rel_object

        prop = extract_property(row.property_name, row.property_types, row.mandatory)
        if prop is not None:
            rel_object.properties.append(prop)

    def consume(self, rows: Iterable[RelationshipPropertyRow]) -> Dict[str, RelationshipObjectType]:
        try:
            for row in rows:
                self.add(row)
        finally:
            release(rows)
        logger.debug(
            "Aggregated %d relationship object types", len(self.relationship_object_types)
        )
        return self.relationship_object_types
