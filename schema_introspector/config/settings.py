"""
Centralized application settings.

Environment variables drive the database connection so that deployments can
override defaults without code changes. Introspection options are passed per
call and validated before any row is read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


class InvalidConfigurationError(TypeError):
    """Raised when an introspection option has the wrong type."""


@dataclass(frozen=True)
class Neo4jSettings:
    """Connection parameters for Neo4j."""

    uri: str
    username: str
    password: str
    database: str = "neo4j"


def load_settings() -> Neo4jSettings:
    """
    Load Neo4j configuration from environment variables.

    Required vars:
        SCHEMA_INTROSPECTOR_NEO4J_URI
        SCHEMA_INTROSPECTOR_NEO4J_USER
        SCHEMA_INTROSPECTOR_NEO4J_PASSWORD

    Optional:
        SCHEMA_INTROSPECTOR_NEO4J_DATABASE (defaults to \"neo4j\")
    """

    uri = os.environ.get("SCHEMA_INTROSPECTOR_NEO4J_URI")
    username = os.environ.get("SCHEMA_INTROSPECTOR_NEO4J_USER")
    password = os.environ.get("SCHEMA_INTROSPECTOR_NEO4J_PASSWORD")
    database = os.environ.get("SCHEMA_INTROSPECTOR_NEO4J_DATABASE", "neo4j")

    if not uri or not username or not password:
        raise RuntimeError("Neo4j configuration missing required environment variables")

    return Neo4jSettings(uri=uri, username=username, password=password, database=database)


@dataclass(frozen=True)
class IntrospectionConfig:
    """
    Options of a single introspection call.

    Attributes:
        pretty_print: Indent the emitted JSON.
        use_constant_ids: Derive ids from label and type names instead of
            generating random ones.
        quote_tokens: Store token values in a form usable as Cypher identifiers.
        sample_only: Limit the search for relationship endpoints to a sample
            per relationship type.
    """

    pretty_print: bool = False
    use_constant_ids: bool = True
    quote_tokens: bool = True
    sample_only: bool = True

    def __post_init__(self) -> None:
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if not isinstance(value, bool):
                raise InvalidConfigurationError(
                    f"{config_field.name} must be a boolean, got {type(value).__name__}"
                )

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None) -> "IntrospectionConfig":
        """
        Build a config from camelCase parameters such as ``{"useConstantIds": False}``.

        Unknown keys are ignored.
        """

        params = params or {}
        if not isinstance(params, Mapping):
            raise InvalidConfigurationError("introspection parameters must be a mapping")

        values = {}
        for key, name in PARAMETER_NAMES.items():
            if key in params:
                value = params[key]
                if not isinstance(value, bool):
                    raise InvalidConfigurationError(
                        f"{key} must be a boolean, got {type(value).__name__}"
                    )
                values[name] = value
        return cls(**values)


PARAMETER_NAMES = {
    "prettyPrint": "pretty_print",
    "useConstantIds": "use_constant_ids",
    "quoteTokens": "quote_tokens",
    "sampleOnly": "sample_only",
}
