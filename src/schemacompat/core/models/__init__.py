"""Core models."""

from .schema_defs import (
    AnyType,
    ArrayType,
    BooleanType,
    Check,
    DateType,
    DefaultType,
    EnumType,
    LiteralType,
    NeverType,
    NumberType,
    ObjectType,
    OptionalType,
    SchemaNode,
    StringType,
    TupleType,
    UndefinedType,
    UnionType,
    UnsupportedType,
    descendant_kinds,
    is_optional_field,
    iter_nodes,
    node_signature,
    node_to_dict,
)
from .documents import BaseNode, ImageNode, TextNode

__all__ = [
    "SchemaNode",
    "Check",
    "ObjectType",
    "ArrayType",
    "TupleType",
    "UnionType",
    "OptionalType",
    "DefaultType",
    "StringType",
    "NumberType",
    "DateType",
    "EnumType",
    "LiteralType",
    "BooleanType",
    "AnyType",
    "NeverType",
    "UndefinedType",
    "UnsupportedType",
    "iter_nodes",
    "descendant_kinds",
    "is_optional_field",
    "node_signature",
    "node_to_dict",
    "BaseNode",
    "TextNode",
    "ImageNode",
]
