"""Schema adapter — validator types and JSON schema descriptions.

A caller hands the scraper either a validating type (a pydantic model class,
or any type wrapped in ``ValidatorSchema``) or a plain JSON schema
description (a ``dict``, or ``DescriptionSchema``). ``resolve_schema``
detects which one it got; everything downstream works on the tagged handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, PydanticUserError, TypeAdapter, create_model
from pydantic_ai import StructuredDict

from .errors import UnsupportedSchemaError

logger = logging.getLogger(__name__)

# Keywords describing composition we can't turn back into a pydantic type
_UNSUPPORTED_KEYWORDS = frozenset(
    {
        "allOf",
        "oneOf",
        "not",
        "if",
        "then",
        "else",
        "dependentSchemas",
        "dependentRequired",
    }
)

_PRIMITIVE_MAP: dict[str, type] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": bool,
    "null": type(None),
}


@dataclass(frozen=True)
class ValidatorSchema:
    """A type pydantic can validate against and describe."""

    type: Any
    kind: Literal["validator"] = "validator"


@dataclass(frozen=True)
class DescriptionSchema:
    """A JSON schema description with no local validation."""

    json_schema: dict[str, Any]
    name: str | None = None
    description: str | None = None
    kind: Literal["description"] = "description"


SchemaHandle = Union[ValidatorSchema, DescriptionSchema]


def resolve_schema(schema: Any) -> SchemaHandle:
    """Wrap a caller-supplied schema in its handle variant."""
    if isinstance(schema, (ValidatorSchema, DescriptionSchema)):
        return schema
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return ValidatorSchema(schema)
    if isinstance(schema, dict):
        return DescriptionSchema(schema)
    raise UnsupportedSchemaError(
        f"expected a pydantic model, ValidatorSchema, dict or DescriptionSchema, "
        f"got {type(schema).__name__}"
    )


def output_type(handle: SchemaHandle) -> Any:
    """Return the output type handed to the model-call capability."""
    if handle.kind == "validator":
        return handle.type
    return StructuredDict(
        handle.json_schema,
        name=handle.name or handle.json_schema.get("title"),
        description=handle.description or handle.json_schema.get("description"),
    )


def to_description(handle: SchemaHandle) -> dict[str, Any]:
    """Return the JSON schema description of *handle*."""
    if handle.kind == "description":
        return handle.json_schema
    try:
        return TypeAdapter(handle.type).json_schema()
    except PydanticUserError as exc:
        raise UnsupportedSchemaError(f"cannot describe {handle.type!r}: {exc}") from exc


def to_validator(handle: SchemaHandle) -> Any:
    """Return a type that validates values described by *handle*.

    A validator handle is returned as is. A description handle is not
    rejected: it is rebuilt into a runtime pydantic type (objects, arrays,
    primitives, ``enum``/``const`` literals, nullable unions and local
    ``$ref`` pointers), so a description can be checked locally or turned
    back into a schema. ``run`` and ``stream`` never call this; they hand
    descriptions to the model through ``output_type`` unvalidated.
    Unsupported constructs raise ``UnsupportedSchemaError``.
    """
    if handle.kind == "validator":
        return handle.type
    schema = handle.json_schema
    return _resolve_type(schema, handle.name or schema.get("title", "Model"), schema, ())


def _check_unsupported(node: dict[str, Any]) -> None:
    for keyword in _UNSUPPORTED_KEYWORDS:
        if keyword in node:
            raise UnsupportedSchemaError(f"unsupported JSON schema keyword: {keyword}")


def _lookup_ref(ref: str, root: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Resolve a local ``#/$defs/Name`` (or ``#/definitions/Name``) pointer."""
    prefix, _, name = ref.rpartition("/")
    if prefix not in ("#/$defs", "#/definitions"):
        raise UnsupportedSchemaError(f"unsupported $ref: {ref}")
    definitions = root.get(prefix[2:], {})
    if name not in definitions:
        raise UnsupportedSchemaError(f"unresolved $ref: {ref}")
    return name, definitions[name]


def _resolve_type(
    node: dict[str, Any],
    name: str,
    root: dict[str, Any],
    seen: tuple[str, ...],
) -> Any:
    _check_unsupported(node)

    if "$ref" in node:
        ref_name, target = _lookup_ref(node["$ref"], root)
        if ref_name in seen:
            raise UnsupportedSchemaError(f"recursive $ref: {node['$ref']}")
        return _resolve_type(target, ref_name, root, seen + (ref_name,))

    if "anyOf" in node:
        variants = [v for v in node["anyOf"] if v.get("type") != "null"]
        if len(variants) != 1:
            raise UnsupportedSchemaError("anyOf is only supported for nullable values")
        return _resolve_type(variants[0], name, root, seen) | None

    if "const" in node:
        return Literal[node["const"]]

    if "enum" in node:
        if not node["enum"]:
            raise UnsupportedSchemaError("empty enum")
        return Literal[tuple(node["enum"])]

    json_type = node.get("type", "string")
    if isinstance(json_type, list):
        non_null = [t for t in json_type if t != "null"]
        if len(non_null) != 1:
            raise UnsupportedSchemaError(f"unsupported type union: {json_type}")
        return _resolve_type({**node, "type": non_null[0]}, name, root, seen) | None

    if json_type == "object":
        if node.get("properties"):
            return _build_model(node, name, root, seen)
        return dict[str, Any]

    if json_type == "array":
        items = node.get("items")
        if items:
            return list[_resolve_type(items, f"{name}_item", root, seen)]
        return list[Any]

    if json_type not in _PRIMITIVE_MAP:
        raise UnsupportedSchemaError(f"unsupported JSON schema type: {json_type!r}")
    return _PRIMITIVE_MAP[json_type]


def _build_model(
    node: dict[str, Any],
    name: str,
    root: dict[str, Any],
    seen: tuple[str, ...],
) -> type[BaseModel]:
    required = set(node.get("required", []))
    fields: dict[str, Any] = {}

    for prop_name, prop_schema in node["properties"].items():
        prop_type = _resolve_type(prop_schema, f"{name}_{prop_name}", root, seen)
        field_kwargs: dict[str, Any] = {}
        if "description" in prop_schema:
            field_kwargs["description"] = prop_schema["description"]

        if prop_name in required:
            fields[prop_name] = (prop_type, Field(..., **field_kwargs))
        else:
            fields[prop_name] = (prop_type | None, Field(prop_schema.get("default"), **field_kwargs))

    logger.debug("built model from description", extra={"model": name, "fields": list(fields)})
    return create_model(name, **fields)
