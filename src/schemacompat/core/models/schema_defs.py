"""Schema tree model.

A schema is a tree of immutable nodes. Compat layers never mutate a node; they
build new ones with :func:`dataclasses.replace` so the same input tree can be
shared between concurrent transformations.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field as dataclass_field, replace
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Iterable, Iterator, Optional, Set, Tuple

from ..errors import SchemaError

STRING_CHECK_KINDS = frozenset(
    {"regex", "emoji", "email", "url", "uuid", "cuid", "min", "max", "length", "datetime"}
)
NUMBER_CHECK_KINDS = frozenset({"gt", "gte", "lt", "lte", "multipleOf", "int", "finite"})
ARRAY_CHECK_KINDS = frozenset({"min", "max", "length"})
DATE_CHECK_KINDS = frozenset({"min", "max"})


@dataclass(frozen=True)
class Check:
    """One constraint on a scalar or array node, e.g. ``Check("min", 3)``."""

    kind: str
    value: Any = None


def append_description(base: str | None, extra: str | None) -> str | None:
    """Join two description fragments; ``base`` always comes first."""
    if not extra:
        return base
    if not base:
        return extra
    return f"{base}\n{extra}"


def _ensure_node(value: Any, where: str) -> None:
    if not isinstance(value, SchemaNode):
        raise SchemaError(f"{where} must be a schema node, got {type(value).__name__}")


def _freeze_checks(node: "SchemaNode", checks: Iterable[Any], allowed: FrozenSet[str]) -> None:
    frozen = []
    for check in checks:
        if isinstance(check, str):
            check = Check(check)
        if not isinstance(check, Check):
            raise SchemaError(f"Invalid check on {node.kind} node: {check!r}")
        if check.kind not in allowed:
            raise SchemaError(f"Unknown {node.kind} check: {check.kind}")
        frozen.append(check)
    object.__setattr__(node, "checks", tuple(frozen))


@dataclass(frozen=True, kw_only=True)
class SchemaNode:
    kind: ClassVar[str] = "node"

    description: Optional[str] = None
    nullable: bool = False

    def children(self) -> Tuple["SchemaNode", ...]:
        return ()

    def map_children(self, fn: Callable[["SchemaNode"], "SchemaNode"]) -> "SchemaNode":
        return self

    def describe(self, text: str | None) -> "SchemaNode":
        """Return a copy with ``text`` appended to the description."""
        return replace(self, description=append_description(self.description, text))


@dataclass(frozen=True)
class ObjectType(SchemaNode):
    kind: ClassVar[str] = "object"

    fields: Dict[str, SchemaNode] = dataclass_field(default_factory=dict)
    # None means "every field that is not Optional-derived" (see is_optional_field).
    required: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        fields = dict(self.fields)
        for name, value in fields.items():
            _ensure_node(value, f"Field '{name}'")
        object.__setattr__(self, "fields", fields)
        if self.required is None:
            required = frozenset(n for n, v in fields.items() if not is_optional_field(v))
        else:
            required = frozenset(self.required)
            unknown = required - set(fields)
            if unknown:
                raise SchemaError(f"Required names not in fields: {', '.join(sorted(unknown))}")
        object.__setattr__(self, "required", required)

    def children(self) -> Tuple[SchemaNode, ...]:
        return tuple(self.fields.values())

    def map_children(self, fn):
        return replace(self, fields={name: fn(value) for name, value in self.fields.items()})


@dataclass(frozen=True)
class ArrayType(SchemaNode):
    kind: ClassVar[str] = "array"

    element: SchemaNode
    checks: Tuple[Check, ...] = ()

    def __post_init__(self) -> None:
        _ensure_node(self.element, "Array element")
        _freeze_checks(self, self.checks, ARRAY_CHECK_KINDS)

    def children(self) -> Tuple[SchemaNode, ...]:
        return (self.element,)

    def map_children(self, fn):
        return replace(self, element=fn(self.element))


@dataclass(frozen=True)
class TupleType(SchemaNode):
    kind: ClassVar[str] = "tuple"

    elements: Tuple[SchemaNode, ...] = ()

    def __post_init__(self) -> None:
        elements = tuple(self.elements)
        for idx, value in enumerate(elements):
            _ensure_node(value, f"Tuple element {idx}")
        object.__setattr__(self, "elements", elements)

    def children(self) -> Tuple[SchemaNode, ...]:
        return self.elements

    def map_children(self, fn):
        return replace(self, elements=tuple(fn(e) for e in self.elements))


@dataclass(frozen=True)
class UnionType(SchemaNode):
    kind: ClassVar[str] = "union"

    variants: Tuple[SchemaNode, ...] = ()

    def __post_init__(self) -> None:
        variants = tuple(self.variants)
        if len(variants) < 2:
            raise SchemaError("Union must have at least 2 variants")
        for idx, value in enumerate(variants):
            _ensure_node(value, f"Union variant {idx}")
        object.__setattr__(self, "variants", variants)

    def children(self) -> Tuple[SchemaNode, ...]:
        return self.variants

    def map_children(self, fn):
        return replace(self, variants=tuple(fn(v) for v in self.variants))


@dataclass(frozen=True)
class OptionalType(SchemaNode):
    kind: ClassVar[str] = "optional"

    inner: SchemaNode

    def __post_init__(self) -> None:
        _ensure_node(self.inner, "Optional inner type")

    def children(self) -> Tuple[SchemaNode, ...]:
        return (self.inner,)

    def map_children(self, fn):
        return replace(self, inner=fn(self.inner))


@dataclass(frozen=True)
class DefaultType(SchemaNode):
    """Wraps ``inner`` with a default; ``default`` may be a zero-argument factory."""

    kind: ClassVar[str] = "default"

    inner: SchemaNode
    default: Any = None

    def __post_init__(self) -> None:
        _ensure_node(self.inner, "Default inner type")

    def default_value(self) -> Any:
        return self.default() if callable(self.default) else self.default

    def children(self) -> Tuple[SchemaNode, ...]:
        return (self.inner,)

    def map_children(self, fn):
        return replace(self, inner=fn(self.inner))


@dataclass(frozen=True)
class StringType(SchemaNode):
    kind: ClassVar[str] = "string"

    checks: Tuple[Check, ...] = ()

    def __post_init__(self) -> None:
        _freeze_checks(self, self.checks, STRING_CHECK_KINDS)


@dataclass(frozen=True)
class NumberType(SchemaNode):
    kind: ClassVar[str] = "number"

    checks: Tuple[Check, ...] = ()

    def __post_init__(self) -> None:
        _freeze_checks(self, self.checks, NUMBER_CHECK_KINDS)


@dataclass(frozen=True)
class DateType(SchemaNode):
    kind: ClassVar[str] = "date"

    checks: Tuple[Check, ...] = ()

    def __post_init__(self) -> None:
        _freeze_checks(self, self.checks, DATE_CHECK_KINDS)


@dataclass(frozen=True)
class EnumType(SchemaNode):
    kind: ClassVar[str] = "enum"

    values: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise SchemaError("Enum must have at least one value")
        for value in values:
            if value is not None and not isinstance(value, (str, int, float, bool)):
                raise SchemaError(f"Enum values must be scalars, got {type(value).__name__}")
        object.__setattr__(self, "values", values)


@dataclass(frozen=True)
class LiteralType(SchemaNode):
    kind: ClassVar[str] = "literal"

    value: Any = None


@dataclass(frozen=True)
class BooleanType(SchemaNode):
    kind: ClassVar[str] = "boolean"


@dataclass(frozen=True)
class AnyType(SchemaNode):
    kind: ClassVar[str] = "any"


@dataclass(frozen=True)
class NeverType(SchemaNode):
    kind: ClassVar[str] = "never"


@dataclass(frozen=True)
class UndefinedType(SchemaNode):
    kind: ClassVar[str] = "undefined"


@dataclass(frozen=True)
class UnsupportedType(SchemaNode):
    """Terminal placeholder for a construct the model has no class for."""

    kind: ClassVar[str] = "unsupported"

    original_kind: str = "unknown"


NODE_TYPES: Tuple[type, ...] = (
    ObjectType,
    ArrayType,
    TupleType,
    UnionType,
    OptionalType,
    DefaultType,
    StringType,
    NumberType,
    DateType,
    EnumType,
    LiteralType,
    BooleanType,
    AnyType,
    NeverType,
    UndefinedType,
    UnsupportedType,
)


# --- Traversal helpers ---

def iter_nodes(root: SchemaNode) -> Iterator[SchemaNode]:
    """Yield ``root`` and all of its descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def descendant_kinds(root: SchemaNode) -> Set[str]:
    return {node.kind for node in iter_nodes(root)}


def is_optional_field(node: SchemaNode) -> bool:
    """True when ``node`` is an ``OptionalType``, possibly under ``DefaultType`` wrappers."""
    while isinstance(node, DefaultType):
        node = node.inner
    return isinstance(node, OptionalType)


def effective_kind(node: SchemaNode) -> str:
    """Kind name used in messages; unsupported nodes report what they stood for."""
    if isinstance(node, UnsupportedType):
        return node.original_kind
    return node.kind


def _json_value(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


def node_signature(node: SchemaNode) -> str:
    """Compact shape string, e.g. ``object{id: string, tags?: array[string]}``."""
    if isinstance(node, ObjectType):
        parts = [
            f"{name}{'' if name in node.required else '?'}: "
            f"{node_signature(value.inner if isinstance(value, OptionalType) else value)}"
            for name, value in node.fields.items()
        ]
        return "object{" + ", ".join(parts) + "}"
    if isinstance(node, ArrayType):
        return f"array[{node_signature(node.element)}]"
    if isinstance(node, TupleType):
        return "tuple[" + ", ".join(node_signature(e) for e in node.elements) + "]"
    if isinstance(node, UnionType):
        return " | ".join(node_signature(v) for v in node.variants)
    if isinstance(node, OptionalType):
        return f"optional[{node_signature(node.inner)}]"
    if isinstance(node, DefaultType):
        return node_signature(node.inner)
    if isinstance(node, EnumType):
        return "enum[" + ", ".join(_json_value(v) for v in node.values) + "]"
    if isinstance(node, LiteralType):
        return f"literal[{_json_value(node.value)}]"
    return effective_kind(node)


def _check_to_dict(check: Check) -> Dict[str, Any]:
    out: Dict[str, Any] = {"kind": check.kind}
    if check.value is not None:
        value = check.value
        out["value"] = getattr(value, "pattern", value)
    return out


def node_to_dict(node: SchemaNode) -> Dict[str, Any]:
    """Plain-dict dump of a tree for debugging and the CLI (not JSON Schema)."""
    out: Dict[str, Any] = {"kind": node.kind}
    if isinstance(node, ObjectType):
        out["fields"] = {name: node_to_dict(value) for name, value in node.fields.items()}
        out["required"] = [name for name in node.fields if name in node.required]
    elif isinstance(node, ArrayType):
        out["element"] = node_to_dict(node.element)
    elif isinstance(node, TupleType):
        out["elements"] = [node_to_dict(e) for e in node.elements]
    elif isinstance(node, UnionType):
        out["variants"] = [node_to_dict(v) for v in node.variants]
    elif isinstance(node, (OptionalType, DefaultType)):
        out["inner"] = node_to_dict(node.inner)
        if isinstance(node, DefaultType):
            out["default"] = "<factory>" if callable(node.default) else node.default
    elif isinstance(node, EnumType):
        out["values"] = list(node.values)
    elif isinstance(node, LiteralType):
        out["value"] = node.value
    elif isinstance(node, UnsupportedType):
        out["original_kind"] = node.original_kind
    checks = getattr(node, "checks", ())
    if checks:
        out["checks"] = [_check_to_dict(c) for c in checks]
    if node.nullable:
        out["nullable"] = True
    if node.description:
        out["description"] = node.description
    return out
