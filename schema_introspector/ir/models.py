"""
IR model definitions for the graph schema introspector.

These dataclasses describe the schema document produced by a single
introspection pass, plus the raw rows the pass consumes from a schema source.
Entities refer to each other only through `Ref` values holding the target's
id, so a `GraphSchema` is a set of flat catalogs keyed by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Token:
    """A node label or relationship type with its assigned id."""

    id: str
    value: str


@dataclass(frozen=True, slots=True)
class Type:
    """
    A canonical property type.

    `item_type` is only set when `kind` is ``"array"``.
    """

    kind: str
    item_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Property:
    """
    A property observed on a node or relationship object type.

    `types` keeps every type reported for the observation in source order;
    an empty tuple means no non-null value was ever sampled.
    """

    token: str
    types: Tuple[Type, ...]
    mandatory: bool


@dataclass(frozen=True, slots=True)
class Ref:
    """Pointer to another entity of the same document by id."""

    value: str


@dataclass(slots=True)
class NodeObjectType:
    """A distinct combination of labels together with its properties."""

    id: str
    labels: List[Ref]
    properties: List[Property] = field(default_factory=list)

    def refs(self) -> Iterator[Ref]:
        yield from self.labels


@dataclass(slots=True)
class RelationshipObjectType:
    """A relationship type between two node object types with its properties."""

    id: str
    type: Ref
    from_: Ref
    to: Ref
    properties: List[Property] = field(default_factory=list)


@dataclass(frozen=True)
class GraphSchema:
    """
    The complete schema document of one introspection pass.

    Every mapping is keyed by the id of the entity it holds.
    """

    node_labels: Dict[str, Token]
    relationship_types: Dict[str, Token]
    node_object_types: Dict[str, NodeObjectType]
    relationship_object_types: Dict[str, RelationshipObjectType]


@dataclass(frozen=True, slots=True)
class NodePropertyRow:
    """
    One row of node type properties as delivered by a schema source.

    `node_type` is the compound key of the label set, e.g. ``:`Actor`:`Person```.
    `property_name` is None for label combinations without any property.
    """

    node_type: str
    node_labels: Tuple[str, ...]
    property_name: Optional[str] = None
    property_types: Tuple[str, ...] = ()
    mandatory: bool = False


@dataclass(frozen=True, slots=True)
class RelationshipPropertyRow:
    """One row of relationship type properties for a (from, to) label pair."""

    rel_type: str
    from_labels: Tuple[str, ...]
    to_labels: Tuple[str, ...]
    property_name: Optional[str] = None
    property_types: Tuple[str, ...] = ()
    mandatory: bool = False


def iter_refs(schema: GraphSchema) -> Iterable[Tuple[Mapping[str, object], Ref]]:
    """Yield every reference of the document together with the catalog it points into."""

    for node_object in schema.node_object_types.values():
        for ref in node_object.refs():
            yield schema.node_labels, ref

    for rel_object in schema.relationship_object_types.values():
        yield schema.relationship_types, rel_object.type
        yield schema.node_object_types, rel_object.from_
        yield schema.node_object_types, rel_object.to
