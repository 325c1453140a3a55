"""Shared fixtures: an in-memory schema source standing in for a database."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence

import pytest

from schema_introspector.graph import SchemaSource
from schema_introspector.ir import NodePropertyRow, RelationshipPropertyRow


class FakeSchemaSource(SchemaSource):
    """
    Serves canned rows. An exception instance placed among the rows is raised
    when the stream reaches it.
    """

    def __init__(
        self,
        labels: Sequence[str] = (),
        relationship_types: Sequence[str] = (),
        node_rows: Sequence[object] = (),
        relationship_rows: Sequence[object] = (),
        sampled_relationship_rows: Optional[Sequence[object]] = None,
    ) -> None:
        self.labels = list(labels)
        self.types = list(relationship_types)
        self.node_rows = list(node_rows)
        self.relationship_rows = list(relationship_rows)
        self.sampled_relationship_rows = (
            list(sampled_relationship_rows) if sampled_relationship_rows is not None else None
        )
        self.requested_sample_sizes: List[Optional[int]] = []
        self.opened: List[str] = []
        self.closed: List[str] = []
        self.source_closed = False

    def _stream(self, name: str, items: Iterable[object]) -> Iterator:
        self.opened.append(name)
        try:
            for item in items:
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.closed.append(name)

    def close(self) -> None:
        self.source_closed = True

    def node_labels(self):
        return self._stream("labels", self.labels)

    def relationship_types(self):
        return self._stream("relationship_types", self.types)

    def node_property_rows(self):
        return self._stream("node_rows", self.node_rows)

    def relationship_property_rows(self, sample_size):
        self.requested_sample_sizes.append(sample_size)
        rows = self.relationship_rows
        if sample_size is not None and self.sampled_relationship_rows is not None:
            rows = self.sampled_relationship_rows
        return self._stream("relationship_rows", rows)


def node_row(labels, property_name=None, property_types=(), mandatory=False, node_type=None):
    labels = tuple(labels)
    if node_type is None:
        node_type = ":" + ":".join(f"`{label}`" for label in labels)
    return NodePropertyRow(
        node_type=node_type,
        node_labels=labels,
        property_name=property_name,
        property_types=tuple(property_types),
        mandatory=mandatory,
    )


def rel_row(rel_type, from_labels, to_labels, property_name=None, property_types=(), mandatory=False):
    return RelationshipPropertyRow(
        rel_type=rel_type,
        from_labels=tuple(from_labels),
        to_labels=tuple(to_labels),
        property_name=property_name,
        property_types=tuple(property_types),
        mandatory=mandatory,
    )


@pytest.fixture
def disjoint_source() -> FakeSchemaSource:
    """(A1)-[:A_TYPE {x}]->(B1) and (A2)-[:A_TYPE {x}]->(B2); sampling only finds the first pair."""

    first = rel_row("A_TYPE", ["A1"], ["B1"], "x", ["String"], True)
    second = rel_row("A_TYPE", ["A2"], ["B2"], "x", ["String"], True)
    return FakeSchemaSource(
        labels=["A1", "B2", "A2", "B1"],
        relationship_types=["A_TYPE"],
        node_rows=[node_row(["A1"]), node_row(["A2"]), node_row(["B1"]), node_row(["B2"])],
        relationship_rows=[first, second],
        sampled_relationship_rows=[first],
    )


@pytest.fixture
def movie_source() -> FakeSchemaSource:
    """A mixed graph with multi-label nodes, array types and awkward token names."""

    return FakeSchemaSource(
        labels=["SomeNode", "Actor", "Person", "L1", "L `2", "L2", "L3", "Unrelated", "Book"],
        relationship_types=["RELATED_TO", "REVIEWED"],
        node_rows=[
            node_row(["Actor", "Person"], "name", ["String"], True),
            node_row(["Actor", "Person"], "id", ["String", "Long", "StringArray", "LongArray"], False),
            node_row(["Actor", "Person"], "f", ["Double", "Long"], False),
            node_row(["Actor", "Person"], "p", ["Point"], False),
            node_row(["Book"]),
            node_row(["L2", "L1"], node_type=":`L1`:`L2`"),
            node_row(["L1", "L `2"], node_type=":`L ``2`:`L1`"),
            node_row(["L2", "L3"]),
            node_row(["Person"]),
            node_row(["SomeNode"], "idx", ["Long"], True),
            node_row(["Unrelated"]),
        ],
        relationship_rows=[
            rel_row("RELATED_TO", ["L1", "L `2"], ["L2", "L3"], "since", ["DateTime"], True),
            rel_row("RELATED_TO", ["L1", "L2"], ["L2", "L3"], "since", ["DateTime"], True),
            rel_row("RELATED_TO", ["L1", "L2"], ["Unrelated"], "since", ["DateTime"], True),
            rel_row("REVIEWED", ["Person"], ["Book"]),
        ],
    )
