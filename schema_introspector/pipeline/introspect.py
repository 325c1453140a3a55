"""
High-level introspection pipeline.

Reads labels, relationship types and property rows from a schema source and
assembles them into a `GraphSchema` in a single sequential pass.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from schema_introspector.config import IntrospectionConfig, InvalidConfigurationError
from schema_introspector.graph.ids import (
    EPHEMERAL_IDS,
    EphemeralIds,
    NodeObjectIdGenerator,
    RelationshipObjectIdGenerator,
    token_id_function,
)
from schema_introspector.graph.schema import (
    DEFAULT_SAMPLE_SIZE,
    NODE_LABEL_PREFIX,
    RELATIONSHIP_TYPE_PREFIX,
)
from schema_introspector.graph.serialization import dumps
from schema_introspector.graph.source import SchemaSource
from schema_introspector.ir import GraphSchema
from schema_introspector.pipeline.aggregate import NodeAggregator, RelationshipAggregator
from schema_introspector.pipeline.tokens import build_catalog

logger = logging.getLogger(__name__)


class Introspector:
    """
    Coordinates one introspection of a schema source.

    An instance carries the memoized node ids and the relationship id
    disambiguation of its call; create a new one per introspection.
    """

    def __init__(
        self,
        source: SchemaSource,
        config: IntrospectionConfig | None = None,
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        ephemeral_ids: EphemeralIds = EPHEMERAL_IDS,
    ) -> None:
        config = config or IntrospectionConfig()
        if not isinstance(config, IntrospectionConfig):
            raise InvalidConfigurationError(
                f"expected IntrospectionConfig, got {type(config).__name__}"
            )
        self._source = source
        self._config = config
        self._sample_size = sample_size
        self._ephemeral_ids = ephemeral_ids

    def build_schema(self) -> GraphSchema:
        config = self._config

        label_tokens = build_catalog(
            self._source.node_labels(),
            config.quote_tokens,
            token_id_function(NODE_LABEL_PREFIX, config.use_constant_ids, self._ephemeral_ids),
        )
        relationship_tokens = build_catalog(
            self._source.relationship_types(),
            config.quote_tokens,
            token_id_function(RELATIONSHIP_TYPE_PREFIX, config.use_constant_ids, self._ephemeral_ids),
        )
        logger.debug(
            "Found %d node labels and %d relationship types",
            len(label_tokens),
            len(relationship_tokens),
        )

        nodes = NodeAggregator(
            label_tokens, NodeObjectIdGenerator(config.use_constant_ids, self._ephemeral_ids)
        )
        if label_tokens:
            nodes.consume(self._source.node_property_rows())

        relationships = RelationshipAggregator(
            relationship_tokens,
            nodes,
            RelationshipObjectIdGenerator(config.use_constant_ids, self._ephemeral_ids),
        )
        if relationship_tokens:
            sample_size = self._sample_size if config.sample_only else None
            relationships.consume(self._source.relationship_property_rows(sample_size))

        schema = GraphSchema(
            node_labels={token.id: token for token in label_tokens.values()},
            relationship_types={token.id: token for token in relationship_tokens.values()},
            node_object_types=nodes.node_object_types,
            relationship_object_types=relationships.relationship_object_types,
        )
        logger.info(
            "Introspection complete: %d node object types, %d relationship object types",
            len(schema.node_object_types),
            len(schema.relationship_object_types),
        )
        return schema


def introspect(source: SchemaSource, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Introspect `source` and return the schema as JSON.

    `params` uses the camelCase option names (``prettyPrint``, ``useConstantIds``,
    ``quoteTokens``, ``sampleOnly``) and is validated before any row is read.
    """

    config = IntrospectionConfig.from_params(params)
    schema = Introspector(source, config).build_schema()
    return dumps(schema, pretty_print=config.pretty_print)
