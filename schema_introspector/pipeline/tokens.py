"""
Token catalogs for node labels and relationship types.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable

from schema_introspector.graph.schema import sanitize
from schema_introspector.ir import Token


def release(stream: Iterable[Any]) -> None:
    """Close a row stream if it holds resources (e.g. a generator with an open session)."""

    close = getattr(stream, "close", None)
    if callable(close):
        close()


def build_catalog(
    raw_names: Iterable[str],
    quote: bool,
    id_function: Callable[[str], str],
) -> Dict[str, Token]:
    """
    Turn raw token names into tokens keyed by their raw name.

    The id is always computed from the raw name; with `quote` the stored value
    is the sanitized form of the name. Duplicate names keep their first token.
    The stream is released whether or not reading it succeeds.
    """

    catalog: Dict[str, Token] = {}
    try:
        for raw_name in raw_names:
            if raw_name in catalog:
                continue
            value = (sanitize(raw_name) or raw_name) if quote else raw_name
            catalog[raw_name] = Token(id=id_function(raw_name), value=value)
    finally:
        release(raw_names)
    return catalog
