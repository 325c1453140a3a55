"""
JSON encoding of graph schema documents.

The output follows the graph schema interchange representation: tokens and
object types carry a ``$id``, references are written as ``{"$ref": "#<id>"}``,
property type lists collapse to null, a single object or an array depending on
their length, and ``nullable`` is only written when it is false. Decoding
checks the document shape with pydantic models before resolving references.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Discriminator, Field, StrictBool, StrictStr, Tag, ValidationError

from schema_introspector.graph.schema import (
    ARRAY_KIND,
    GRAPH_SCHEMA_REPRESENTATION_VERSION,
    KNOWN_TYPE_KINDS,
)
from schema_introspector.ir import (
    GraphSchema,
    NodeObjectType,
    Property,
    Ref,
    RelationshipObjectType,
    Token,
    Type,
)

NULLABLE_DEFAULT = True


class GraphSchemaFormatError(ValueError):
    """Raised when a JSON document is not a valid graph schema representation."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


# Encoding ---------------------------------------------------------------------
def to_document(schema: GraphSchema) -> Dict[str, Any]:
    """Convert a schema into the plain JSON-compatible structure of the representation."""

    return {
        "graphSchemaRepresentation": {
            "version": GRAPH_SCHEMA_REPRESENTATION_VERSION,
            "graphSchema": {
                "nodeLabels": [_token_to_json(token) for token in schema.node_labels.values()],
                "relationshipTypes": [
                    _token_to_json(token) for token in schema.relationship_types.values()
                ],
                "nodeObjectTypes": [
                    _node_object_to_json(node_object)
                    for node_object in schema.node_object_types.values()
                ],
                "relationshipObjectTypes": [
                    _relationship_object_to_json(rel_object)
                    for rel_object in schema.relationship_object_types.values()
                ],
            },
        }
    }


def dumps(schema: GraphSchema, *, pretty_print: bool = False) -> str:
    document = to_document(schema)
    if pretty_print:
        return json.dumps(document, indent=2, ensure_ascii=False)
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def _token_to_json(token: Token) -> Dict[str, Any]:
    return {"$id": token.id, "token": token.value}


def _ref_to_json(ref: Ref) -> Dict[str, Any]:
    return {"$ref": "#" + ref.value}


def _type_to_json(type_: Type) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": type_.kind}
    if type_.kind == ARRAY_KIND and type_.item_type is not None:
        payload["items"] = {"type": type_.item_type}
    return payload


def _types_to_json(types: Sequence[Type]) -> Any:
    if not types:
        return None
    if len(types) == 1:
        return _type_to_json(types[0])
    return [_type_to_json(type_) for type_ in types]


def _property_to_json(prop: Property) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"token": prop.token, "type": _types_to_json(prop.types)}
    nullable = not prop.mandatory
    if nullable != NULLABLE_DEFAULT:
        payload["nullable"] = nullable
    return payload


def _node_object_to_json(node_object: NodeObjectType) -> Dict[str, Any]:
    return {
        "labels": [_ref_to_json(ref) for ref in node_object.labels],
        "properties": [_property_to_json(prop) for prop in node_object.properties],
        "$id": node_object.id,
    }


def _relationship_object_to_json(rel_object: RelationshipObjectType) -> Dict[str, Any]:
    return {
        "type": _ref_to_json(rel_object.type),
        "from": _ref_to_json(rel_object.from_),
        "to": _ref_to_json(rel_object.to),
        "properties": [_property_to_json(prop) for prop in rel_object.properties],
        "$id": rel_object.id,
    }


# Decoding ---------------------------------------------------------------------
class _TokenDocument(BaseModel):
    id: StrictStr = Field(alias="$id")
    token: StrictStr


class _RefDocument(BaseModel):
    ref: StrictStr = Field(alias="$ref")


class _ItemsDocument(BaseModel):
    type: StrictStr


class _TypeDocument(BaseModel):
    type: StrictStr
    items: Optional[_ItemsDocument] = None


_SINGLE_TYPE = "single"
_MANY_TYPES = "many"


def _type_shape(value: Any) -> Optional[str]:
    if isinstance(value, list):
        return _MANY_TYPES
    if isinstance(value, (dict, BaseModel)):
        return _SINGLE_TYPE
    return None


# One type is written as an object, several as an array.
_PropertyTypes = Annotated[
    Union[
        Annotated[_TypeDocument, Tag(_SINGLE_TYPE)],
        Annotated[List[_TypeDocument], Tag(_MANY_TYPES)],
    ],
    Discriminator(_type_shape),
]


class _PropertyDocument(BaseModel):
    token: StrictStr
    type: Optional[_PropertyTypes]
    nullable: StrictBool = NULLABLE_DEFAULT


class _NodeObjectDocument(BaseModel):
    id: StrictStr = Field(alias="$id")
    labels: List[_RefDocument]
    properties: List[_PropertyDocument]


class _RelationshipObjectDocument(BaseModel):
    id: StrictStr = Field(alias="$id")
    type: _RefDocument
    from_: _RefDocument = Field(alias="from")
    to: _RefDocument
    properties: List[_PropertyDocument]


class _GraphSchemaDocument(BaseModel):
    node_labels: List[_TokenDocument] = Field(alias="nodeLabels")
    relationship_types: List[_TokenDocument] = Field(alias="relationshipTypes")
    node_object_types: List[_NodeObjectDocument] = Field(alias="nodeObjectTypes")
    relationship_object_types: List[_RelationshipObjectDocument] = Field(alias="relationshipObjectTypes")


class _RepresentationDocument(BaseModel):
    version: Optional[StrictStr] = None
    graph_schema: _GraphSchemaDocument = Field(alias="graphSchema")


class _Document(BaseModel):
    graph_schema_representation: _RepresentationDocument = Field(alias="graphSchemaRepresentation")


def loads(text: str) -> GraphSchema:
    try:
        document = _Document.model_validate_json(text)
    except ValidationError as exc:
        raise _format_error(exc) from exc
    return _build(document)


def from_document(document: Any) -> GraphSchema:
    """
    Rebuild a schema from its JSON structure.

    All references must resolve within the document; the first problem found
    raises `GraphSchemaFormatError` naming the offending field.
    """

    try:
        parsed = _Document.model_validate(document)
    except ValidationError as exc:
        raise _format_error(exc) from exc
    return _build(parsed)


def _format_error(exc: ValidationError) -> GraphSchemaFormatError:
    error = exc.errors()[0]
    path = ""
    for part in error["loc"]:
        if isinstance(part, int):
            path += f"[{part}]"
        elif part not in (_SINGLE_TYPE, _MANY_TYPES):
            path = f"{path}.{part}" if path else str(part)
    return GraphSchemaFormatError(path or "$", error["msg"])


def _build(document: _Document) -> GraphSchema:
    graph_schema = document.graph_schema_representation.graph_schema
    path = "graphSchemaRepresentation.graphSchema"

    node_labels = _index(
        ((token.id, Token(id=token.id, value=token.token)) for token in graph_schema.node_labels),
        f"{path}.nodeLabels",
    )
    relationship_types = _index(
        ((token.id, Token(id=token.id, value=token.token)) for token in graph_schema.relationship_types),
        f"{path}.relationshipTypes",
    )
    node_object_types = _index(
        (
            _node_object(item, f"{path}.nodeObjectTypes[{index}]", node_labels)
            for index, item in enumerate(graph_schema.node_object_types)
        ),
        f"{path}.nodeObjectTypes",
    )
    relationship_object_types = _index(
        (
            _relationship_object(
                item, f"{path}.relationshipObjectTypes[{index}]", relationship_types, node_object_types
            )
            for index, item in enumerate(graph_schema.relationship_object_types)
        ),
        f"{path}.relationshipObjectTypes",
    )

    return GraphSchema(
        node_labels=node_labels,
        relationship_types=relationship_types,
        node_object_types=node_object_types,
        relationship_object_types=relationship_object_types,
    )


def _node_object(
    document: _NodeObjectDocument, path: str, node_labels: Mapping[str, Token]
) -> Tuple[str, NodeObjectType]:
    labels = [
        _resolve(ref, f"{path}.labels[{index}]", node_labels) for index, ref in enumerate(document.labels)
    ]
    properties = [
        _property(prop, f"{path}.properties[{index}]") for index, prop in enumerate(document.properties)
    ]
    return document.id, NodeObjectType(id=document.id, labels=labels, properties=properties)


def _relationship_object(
    document: _RelationshipObjectDocument,
    path: str,
    relationship_types: Mapping[str, Token],
    node_object_types: Mapping[str, NodeObjectType],
) -> Tuple[str, RelationshipObjectType]:
    properties = [
        _property(prop, f"{path}.properties[{index}]") for index, prop in enumerate(document.properties)
    ]
    return document.id, RelationshipObjectType(
        id=document.id,
        type=_resolve(document.type, f"{path}.type", relationship_types),
        from_=_resolve(document.from_, f"{path}.from", node_object_types),
        to=_resolve(document.to, f"{path}.to", node_object_types),
        properties=properties,
    )


def _resolve(document: _RefDocument, path: str, catalog: Mapping[str, object]) -> Ref:
    target = document.ref
    if not target.startswith("#"):
        raise GraphSchemaFormatError(f"{path}.$ref", f"reference {target!r} does not start with '#'")
    ref_id = target[1:]
    if ref_id not in catalog:
        raise GraphSchemaFormatError(f"{path}.$ref", f"unresolvable reference {target!r}")
    return Ref(ref_id)


def _property(document: _PropertyDocument, path: str) -> Property:
    types: Tuple[Type, ...]
    if document.type is None:
        types = ()
    elif isinstance(document.type, list):
        types = tuple(_type(item, f"{path}.type[{index}]") for index, item in enumerate(document.type))
    else:
        types = (_type(document.type, f"{path}.type"),)
    return Property(token=document.token, types=types, mandatory=not document.nullable)


def _type(document: _TypeDocument, path: str) -> Type:
    kind = _known_kind(document.type, f"{path}.type")
    if kind != ARRAY_KIND or document.items is None:
        return Type(kind=kind)
    return Type(kind=kind, item_type=_known_kind(document.items.type, f"{path}.items.type"))


def _known_kind(kind: str, path: str) -> str:
    if kind not in KNOWN_TYPE_KINDS:
        raise GraphSchemaFormatError(path, f"unknown type {kind!r}")
    return kind


def _index(entries: Iterable[Tuple[str, Any]], path: str) -> Dict[str, Any]:
    catalog: Dict[str, Any] = {}
    for entry_id, entity in entries:
        if entry_id in catalog:
            raise GraphSchemaFormatError(path, f"duplicate id {entry_id!r}")
        catalog[entry_id] = entity
    return catalog
