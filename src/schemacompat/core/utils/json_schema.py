"""Read authored JSON-Schema-like dicts into schema trees.

This is a lenient reader for hand-written schemas (JSON or YAML), not a
validator:
- Non-required properties become ``OptionalType`` fields.
- ``null`` members of ``type`` lists and ``anyOf``/``oneOf`` become ``nullable``.
- ``format: date-time`` / ``date`` strings become ``DateType``.
- A node with no type and no structure becomes ``AnyType``.
- Unknown types are kept as ``UnsupportedType`` so a compat layer can degrade them.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List

from ..errors import SchemaError
from ..models.schema_defs import (
    AnyType,
    ArrayType,
    BooleanType,
    Check,
    DateType,
    DefaultType,
    EnumType,
    LiteralType,
    NumberType,
    ObjectType,
    OptionalType,
    SchemaNode,
    StringType,
    TupleType,
    UnionType,
    UnsupportedType,
    append_description,
)

_STRING_FORMATS = {"email": "email", "uri": "url", "url": "url", "uuid": "uuid", "cuid": "cuid", "emoji": "emoji"}
_DATE_FORMATS = {"date-time", "date"}


def _as_nullable(node: SchemaNode) -> SchemaNode:
    return node if node.nullable else replace(node, nullable=True)


def _parse_object(raw: Dict[str, Any], description: str | None, path: str) -> SchemaNode:
    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        raise SchemaError(f"{path}: 'properties' must be an object")
    required_list = raw.get("required") or []
    if not isinstance(required_list, list):
        raise SchemaError(f"{path}: 'required' must be a list")
    required = set(required_list)
    fields: Dict[str, SchemaNode] = {}
    for name, prop in properties.items():
        child = _parse(prop, f"{path}.{name}")
        fields[name] = child if name in required else OptionalType(child)
    return ObjectType(fields, description=description)


def _parse_array(raw: Dict[str, Any], description: str | None, path: str) -> SchemaNode:
    prefix = raw.get("prefixItems")
    items = raw.get("items")
    if prefix is None and isinstance(items, list):
        prefix = items
    if prefix is not None:
        if not isinstance(prefix, list):
            raise SchemaError(f"{path}: 'prefixItems' must be a list")
        return TupleType(tuple(_parse(x, f"{path}[{i}]") for i, x in enumerate(prefix)), description=description)

    element = _parse(items, f"{path}[]") if items is not None else AnyType()
    checks: List[Check] = []
    min_items, max_items = raw.get("minItems"), raw.get("maxItems")
    if min_items is not None and min_items == max_items:
        checks.append(Check("length", min_items))
    else:
        if min_items is not None:
            checks.append(Check("min", min_items))
        if max_items is not None:
            checks.append(Check("max", max_items))
    return ArrayType(element, tuple(checks), description=description)


def _parse_string(raw: Dict[str, Any], description: str | None) -> SchemaNode:
    fmt = raw.get("format")
    if fmt in _DATE_FORMATS:
        checks = []
        if raw.get("formatMinimum") is not None:
            checks.append(Check("min", raw["formatMinimum"]))
        if raw.get("formatMaximum") is not None:
            checks.append(Check("max", raw["formatMaximum"]))
        return DateType(tuple(checks), description=description)

    checks = []
    if raw.get("pattern") is not None:
        checks.append(Check("regex", raw["pattern"]))
    min_length, max_length = raw.get("minLength"), raw.get("maxLength")
    if min_length is not None and min_length == max_length:
        checks.append(Check("length", min_length))
    else:
        if min_length is not None:
            checks.append(Check("min", min_length))
        if max_length is not None:
            checks.append(Check("max", max_length))
    if fmt is not None:
        if fmt in _STRING_FORMATS:
            checks.append(Check(_STRING_FORMATS[fmt]))
        else:
            description = append_description(description, f"format: {fmt}")
    return StringType(tuple(checks), description=description)


def _parse_number(raw: Dict[str, Any], description: str | None, integer: bool) -> SchemaNode:
    checks = []
    if integer:
        checks.append(Check("int"))
    for key, kind in (("minimum", "gte"), ("maximum", "lte"), ("multipleOf", "multipleOf")):
        if raw.get(key) is not None:
            checks.append(Check(kind, raw[key]))
    # Draft 4 spells exclusive bounds as booleans next to minimum/maximum.
    for key, inclusive, exclusive in (("exclusiveMinimum", "gte", "gt"), ("exclusiveMaximum", "lte", "lt")):
        value = raw.get(key)
        if value is True:
            checks = [Check(exclusive, c.value) if c.kind == inclusive else c for c in checks]
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            checks.append(Check(exclusive, value))
    return NumberType(tuple(checks), description=description)


def _parse_typed(type_name: Any, raw: Dict[str, Any], description: str | None, path: str) -> SchemaNode:
    if type_name == "object":
        return _parse_object(raw, description, path)
    if type_name == "array":
        return _parse_array(raw, description, path)
    if type_name == "string":
        return _parse_string(raw, description)
    if type_name in ("number", "integer"):
        return _parse_number(raw, description, integer=type_name == "integer")
    if type_name == "boolean":
        return BooleanType(description=description)
    return UnsupportedType(original_kind=str(type_name), description=description)


def _parse_variants(members: Any, description: str | None, path: str) -> SchemaNode:
    if not isinstance(members, list) or not members:
        raise SchemaError(f"{path}: 'anyOf'/'oneOf' must be a non-empty list")
    nullable = any(isinstance(m, dict) and m.get("type") == "null" for m in members)
    variants = [
        _parse(m, f"{path}|{i}") for i, m in enumerate(members) if not (isinstance(m, dict) and m.get("type") == "null")
    ]
    if not variants:
        return UnsupportedType(original_kind="null", description=description)
    if len(variants) == 1:
        node = variants[0].describe(description)
    else:
        node = UnionType(tuple(variants), description=description)
    return _as_nullable(node) if nullable else node


def _parse(raw: Any, path: str) -> SchemaNode:
    if raw is True or raw == {}:
        return AnyType()
    if not isinstance(raw, dict):
        raise SchemaError(f"{path}: schema must be a dictionary")

    if "default" in raw:
        inner = _parse({k: v for k, v in raw.items() if k != "default"}, path)
        return DefaultType(inner, raw["default"])

    description = raw.get("description")
    node: SchemaNode
    if "anyOf" in raw or "oneOf" in raw:
        node = _parse_variants(raw.get("anyOf", raw.get("oneOf")), description, path)
    elif "enum" in raw:
        if not isinstance(raw["enum"], list):
            raise SchemaError(f"{path}: 'enum' must be a list")
        values = [v for v in raw["enum"] if v is not None]
        if values:
            node = EnumType(tuple(values), description=description, nullable=None in raw["enum"])
        else:
            node = UnsupportedType(original_kind="null", description=description)
    elif "const" in raw:
        node = LiteralType(raw["const"], description=description)
    else:
        type_value = raw.get("type")
        if type_value is None:
            if "properties" in raw:
                type_value = "object"
            elif "items" in raw or "prefixItems" in raw:
                type_value = "array"
        if type_value is None:
            node = AnyType(description=description)
        elif isinstance(type_value, list):
            names = [t for t in type_value if t != "null"]
            if not names:
                node = UnsupportedType(original_kind="null", description=description)
            elif len(names) == 1:
                node = _parse_typed(names[0], raw, description, path)
            else:
                node = UnionType(tuple(_parse_typed(t, raw, None, path) for t in names), description=description)
            if "null" in type_value:
                node = _as_nullable(node)
        else:
            node = _parse_typed(type_value, raw, description, path)

    if raw.get("nullable") is True:
        node = _as_nullable(node)
    return node


def parse_json_schema(raw: Dict[str, Any]) -> SchemaNode:
    """Parse a JSON-Schema-like dict into a :class:`SchemaNode` tree."""
    if not isinstance(raw, dict):
        raise SchemaError("Schema must be a dictionary")
    clean = {k: v for k, v in raw.items() if k not in ("$schema", "$id", "title")}
    return _parse(clean, "$")
