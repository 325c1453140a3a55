"""
Id generation for schema entities.

Two strategies exist: constant ids derived from the names of labels and types,
and ephemeral ids that are random but time ordered. The ephemeral source is a
process wide object that may be shared by concurrent introspections; the
node and relationship object generators are stateful and belong to exactly
one introspection.
"""

from __future__ import annotations

import threading
import uuid
from typing import Callable, Dict, Tuple

import uuid6

from schema_introspector.graph.schema import (
    NODE_OBJECT_PREFIX,
    RELATIONSHIP_OBJECT_PREFIX,
    split_strip_and_join,
)

IdFunction = Callable[[str], str]


class EphemeralIds:
    """
    Thread-safe source of time ordered, collision resistant ids.

    Ids are UUID version 7 values: a millisecond timestamp followed by random
    bits, so ids sort by creation time.
    """

    def __init__(self, factory: Callable[[], uuid.UUID] = uuid6.uuid7) -> None:
        self._factory = factory
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            return str(self._factory())


EPHEMERAL_IDS = EphemeralIds()


def token_id_function(prefix: str, use_constant_ids: bool, ephemeral: EphemeralIds = EPHEMERAL_IDS) -> IdFunction:
    """Return the id function for tokens, e.g. ``nl:Person`` for the label ``Person``."""

    if use_constant_ids:
        return lambda name: f"{prefix}:{name}"
    return lambda name: ephemeral.next_id()


class NodeObjectIdGenerator:
    """
    Memoizing id function for node object types.

    The same node type key always yields the same id for the lifetime of the
    generator. Not thread safe.
    """

    def __init__(self, use_constant_ids: bool, ephemeral: EphemeralIds = EPHEMERAL_IDS) -> None:
        self._use_constant_ids = use_constant_ids
        self._ephemeral = ephemeral
        self._cache: Dict[str, str] = {}

    def __call__(self, node_type: str) -> str:
        node_id = self._cache.get(node_type)
        if node_id is None:
            if self._use_constant_ids:
                node_id = split_strip_and_join(node_type, NODE_OBJECT_PREFIX)
            else:
                node_id = self._ephemeral.next_id()
            self._cache[node_type] = node_id
        return node_id


class RelationshipObjectIdGenerator:
    """
    Id function for relationship object types.

    A relationship type connecting several distinct target node object types
    gets one id per target: the first target seen keeps ``r:<type>``, later
    ones get ``r:<type>_1``, ``r:<type>_2`` and so on in order of first
    encounter. Not thread safe.
    """

    def __init__(self, use_constant_ids: bool, ephemeral: EphemeralIds = EPHEMERAL_IDS) -> None:
        self._use_constant_ids = use_constant_ids
        self._ephemeral = ephemeral
        self._suffixes: Dict[str, Dict[str, int]] = {}
        self._ephemeral_ids: Dict[Tuple[str, str], str] = {}

    def __call__(self, rel_type: str, target: str) -> str:
        if not self._use_constant_ids:
            key = (rel_type, target)
            rel_id = self._ephemeral_ids.get(key)
            if rel_id is None:
                rel_id = self._ephemeral.next_id()
                self._ephemeral_ids[key] = rel_id
            return rel_id

        base_id = split_strip_and_join(rel_type, RELATIONSHIP_OBJECT_PREFIX)
        suffixes = self._suffixes.setdefault(base_id, {})
        suffix = suffixes.get(target)
        if suffix is None:
            suffix = len(suffixes)
            suffixes[target] = suffix
        return base_id if suffix == 0 else f"{base_id}_{suffix}"
