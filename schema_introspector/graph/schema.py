"""
Centralized definitions for the graph schema representation.

Holds the format version, id prefixes, the canonical type vocabulary and the
pure helpers used to derive ids and display values from raw token names.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional

from schema_introspector.ir import Type


GRAPH_SCHEMA_REPRESENTATION_VERSION = "1.0.1"

NODE_LABEL_PREFIX = "nl"
RELATIONSHIP_TYPE_PREFIX = "rt"
NODE_OBJECT_PREFIX = "n"
RELATIONSHIP_OBJECT_PREFIX = "r"

DEFAULT_SAMPLE_SIZE = 100

ARRAY_SUFFIX = "Array"
ARRAY_KIND = "array"

TYPE_MAPPING: Mapping[str, str] = {
    "Long": "integer",
    "Double": "float",
}

KNOWN_TYPE_KINDS = frozenset(
    {
        "string",
        "integer",
        "float",
        "boolean",
        "point",
        "date",
        "datetime",
        "localdatetime",
        "localtime",
        "time",
        "duration",
        "byte",
        "short",
        "int",
        "char",
        ARRAY_KIND,
    }
)

_ENCLOSING_TICK_MARKS = re.compile(r"^`(.+)`$")


def map_type(raw_type_name: str) -> Type:
    """
    Map a property type name reported by the database onto the canonical vocabulary.

    ``LongArray`` becomes an array of ``integer``, ``Double`` becomes ``float``
    and everything else is lower-cased.
    """

    if raw_type_name.endswith(ARRAY_SUFFIX) and len(raw_type_name) > len(ARRAY_SUFFIX):
        item = map_type(raw_type_name[: -len(ARRAY_SUFFIX)])
        return Type(kind=ARRAY_KIND, item_type=item.kind)
    return Type(kind=TYPE_MAPPING.get(raw_type_name, raw_type_name).lower())


def sanitize(name: str) -> Optional[str]:
    """
    Return `name` in a form that can be used as an identifier in Cypher.

    Names that are valid bare identifiers are returned unchanged; all others
    have their backticks doubled and are wrapped in backticks. Returns None for
    an empty name.
    """

    if not name:
        return None
    if name.isidentifier():
        return name
    return "`" + name.replace("`", "``") + "`"


def split_strip_and_join(value: str, prefix: str) -> str:
    """
    Turn a compound key such as ``:`A`:`B``` into ``<prefix>:A:B``.

    Blank segments are dropped and a single pair of enclosing backticks is
    removed from every segment.
    """

    segments = []
    for segment in value.split(":"):
        segment = segment.strip()
        if not segment:
            continue
        match = _ENCLOSING_TICK_MARKS.match(segment)
        segments.append(match.group(1) if match else segment)
    return ":".join([prefix, *segments])


def node_type_key(labels: Iterable[str]) -> str:
    """Encode a label set the way the database reports node types, e.g. ``:`A`:`B```."""

    quoted = ("`" + label.replace("`", "``") + "`" for label in sorted(labels))
    return ":" + ":".join(quoted)
