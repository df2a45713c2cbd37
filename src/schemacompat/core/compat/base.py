"""Schema compatibility engine.

A compat layer rewrites a rich schema tree into the subset a provider/model
accepts. Constraints the target cannot enforce are moved into the node's
description as plain-language notes, so the model still sees them.

Variants subclass :class:`SchemaCompatLayer`, implement the two predicates and
override the ``handle_*`` hooks (or the class-level check/kind lists) where
their provider differs from the defaults.
"""
from __future__ import annotations

import datetime as dt
import json
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import (
    Any,
    ClassVar,
    Collection,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Tuple,
)

from ..errors import SchemaConstructionError, SchemaError
from ..models.schema_defs import (
    NODE_TYPES,
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
    effective_kind,
    is_optional_field,
    node_signature,
)
from ..providers.base import ModelDescriptor
from ..utils.logging import get_logger

SchemaTarget = Literal["jsonSchema7", "openApi3"]
JSON_SCHEMA_7: SchemaTarget = "jsonSchema7"
OPEN_API_3: SchemaTarget = "openApi3"

ALL_STRING_CHECKS: Tuple[str, ...] = (
    "regex",
    "emoji",
    "email",
    "url",
    "uuid",
    "cuid",
    "min",
    "max",
    "length",
    "datetime",
)
ALL_NUMBER_CHECKS: Tuple[str, ...] = ("gt", "gte", "lt", "lte", "multipleOf")
ALL_ARRAY_CHECKS: Tuple[str, ...] = ("min", "max", "length")
UNSUPPORTED_KINDS: FrozenSet[str] = frozenset({"never", "undefined", "tuple"})

# check kind -> constraint name in the description note
_STRING_CONSTRAINTS = {
    "regex": "regex",
    "emoji": "emoji",
    "email": "email",
    "url": "url",
    "uuid": "uuid",
    "cuid": "cuid",
    "min": "minLength",
    "max": "maxLength",
    "length": "exactLength",
    "datetime": "datetime",
}
_NUMBER_CONSTRAINTS = {
    "gt": "gt",
    "gte": "gte",
    "lt": "lt",
    "lte": "lte",
    "multipleOf": "multipleOf",
    "int": "int",
    "finite": "finite",
}
_ARRAY_CONSTRAINTS = {"min": "minLength", "max": "maxLength", "length": "exactLength"}

_CONSTRAINT_LABELS = {
    "defaultValue": "default value",
    "minLength": "min length",
    "maxLength": "max length",
    "exactLength": "exact length",
    "gt": "greater than",
    "gte": "greater than or equal to",
    "lt": "less than",
    "lte": "less than or equal to",
    "multipleOf": "multiple of",
    "minDate": "min date",
    "maxDate": "max date",
    "dateFormat": "date format",
}

ANY_CAST_NOTE = (
    'Argument was an "any" type, but you (the LLM) do not support "any", '
    'so it was cast to a "string" type'
)

logger = get_logger(__name__)


def _article(word: str) -> str:
    return "an" if word[:1].lower() in "aeiou" else "a"


def _constraint_value(check: Check) -> Any:
    if check.value is None:
        return True
    return getattr(check.value, "pattern", check.value)


def _iso(value: Any) -> Any:
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value


# One (constraint name, value) pair per degraded check; names may repeat.
Constraints = List[Tuple[str, Any]]


def merge_parameter_description(
    description: str | None,
    constraints: Mapping[str, Any] | Iterable[Tuple[str, Any]],
) -> str | None:
    """Append readable notes for ``constraints`` to ``description``.

    ``{"defaultValue": 5, "minLength": 2}`` becomes
    ``default value: 5; min length: 2``. A sequence of pairs is accepted too,
    so two checks of the same kind each get their own note.
    """
    pairs = list(constraints.items()) if isinstance(constraints, Mapping) else list(constraints)
    if not pairs:
        return description
    note = "; ".join(
        f"{_CONSTRAINT_LABELS.get(name, name)}: {json.dumps(value, default=str, ensure_ascii=False)}"
        for name, value in pairs
    )
    return append_description(description, note)


def split_checks(
    checks: Iterable[Check],
    degrade: Collection[str],
    names: Dict[str, str],
) -> Tuple[Tuple[Check, ...], Constraints]:
    """Partition checks into kept ones and description constraints."""
    kept = []
    constraints: Constraints = []
    for check in checks:
        if check.kind in degrade:
            constraints.append((names.get(check.kind, check.kind), _constraint_value(check)))
        else:
            kept.append(check)
    return tuple(kept), constraints


class SchemaCompatLayer(ABC):
    """Base rewrite rules shared by every provider variant."""

    # Checks moved into descriptions (the rest stay machine-enforced).
    string_checks: ClassVar[Collection[str]] = ALL_STRING_CHECKS
    number_checks: ClassVar[Collection[str]] = ALL_NUMBER_CHECKS
    array_checks: ClassVar[Collection[str]] = ALL_ARRAY_CHECKS
    # Inner kinds allowed under Optional; None means no restriction.
    optional_inner_kinds: ClassVar[Optional[FrozenSet[str]]] = None
    # Kinds the target cannot express at all; they are cast to strings.
    unsupported_kinds: ClassVar[FrozenSet[str]] = UNSUPPORTED_KINDS

    def __init__(self, model: ModelDescriptor) -> None:
        self.model = model

    @property
    def name(self) -> str:
        return type(self).__name__

    def get_model(self) -> ModelDescriptor:
        return self.model

    @abstractmethod
    def get_schema_target(self) -> SchemaTarget:
        """Dialect the serializer must use for this layer's output."""

    @abstractmethod
    def should_apply(self) -> bool:
        """Whether this layer is the right rule set for ``self.model``."""

    def transform(self, root: SchemaNode) -> SchemaNode:
        """Rewrite ``root`` into a tree this layer's provider accepts."""
        logger.debug("Applying %s for %s/%s", self.name, self.model.provider, self.model.model_id)
        return self.process_node(root)

    def process_node(self, node: SchemaNode) -> SchemaNode:
        if not isinstance(node, SchemaNode):
            raise SchemaError(f"Expected a schema node, got {type(node).__name__}")
        if isinstance(node, ObjectType):
            return self.handle_object(node)
        if isinstance(node, ArrayType):
            return self.handle_array(node)
        if isinstance(node, TupleType):
            return self.handle_tuple(node)
        if isinstance(node, UnionType):
            return self.handle_union(node)
        if isinstance(node, OptionalType):
            return self.handle_optional(node)
        if isinstance(node, DefaultType):
            return self.handle_default(node)
        if isinstance(node, StringType):
            return self.handle_string(node)
        if isinstance(node, NumberType):
            return self.handle_number(node)
        if isinstance(node, DateType):
            return self.handle_date(node)
        if isinstance(node, AnyType):
            return self.handle_any(node)
        if isinstance(node, (EnumType, LiteralType, BooleanType)):
            return node
        return self.handle_unsupported(node)

    # --- default handlers ---

    def handle_object(self, node: ObjectType) -> SchemaNode:
        fields = {name: self.process_node(value) for name, value in node.fields.items()}
        demoted = {name for name, value in node.fields.items() if is_optional_field(value)}
        return replace(node, fields=fields, required=node.required - demoted)

    def handle_array(self, node: ArrayType, degrade: Collection[str] | None = None) -> SchemaNode:
        degrade = self.array_checks if degrade is None else degrade
        kept, constraints = split_checks(node.checks, degrade, _ARRAY_CONSTRAINTS)
        self._log_degraded(node, constraints)
        return replace(
            node,
            element=self.process_node(node.element),
            checks=kept,
            description=merge_parameter_description(node.description, constraints),
        )

    def handle_tuple(self, node: TupleType) -> SchemaNode:
        if node.kind in self.unsupported_kinds:
            return self.handle_unsupported(node)
        return node.map_children(self.process_node)

    def handle_union(self, node: UnionType) -> SchemaNode:
        # Unions are kept; a variant that cannot accept them overrides this hook.
        return node.map_children(self.process_node)

    def handle_optional(
        self,
        node: OptionalType,
        allowed_kinds: Collection[str] | None = None,
    ) -> SchemaNode:
        allowed = self.optional_inner_kinds if allowed_kinds is None else allowed_kinds
        inner = node.inner
        result = self.process_node(inner)
        if allowed is not None and inner.kind not in allowed:
            kind = effective_kind(inner)
            shape = node_signature(inner)
            detail = f" ({shape})" if shape != kind else ""
            # Checks the inner type kept cannot ride along on a string.
            leftover = getattr(result, "checks", ()) if not isinstance(result, StringType) else ()
            _, constraints = split_checks(
                leftover,
                {c.kind for c in leftover},
                {**_NUMBER_CONSTRAINTS, **_ARRAY_CONSTRAINTS},
            )
            description = merge_parameter_description(result.description, constraints)
            result = StringType(
                checks=result.checks if isinstance(result, StringType) else (),
                description=append_description(
                    description,
                    f'Argument was an optional "{kind}" type{detail}, but you (the LLM) do not support '
                    f'optional "{kind}", so it was cast to a nullable "string" type',
                ),
            )
            logger.debug("%s cast optional %s to nullable string", self.name, kind)
        return replace(
            result,
            nullable=True,
            description=append_description(result.description, node.description),
        )

    def handle_default(self, node: DefaultType) -> SchemaNode:
        try:
            default_value = node.default_value()
        except Exception as exc:
            raise SchemaConstructionError(f"Failed to evaluate default value: {exc}") from exc
        description = merge_parameter_description(node.description, {"defaultValue": default_value})
        result = self.process_node(node.inner)
        return replace(
            result,
            description=append_description(result.description, description),
            nullable=result.nullable or node.nullable,
        )

    def handle_string(self, node: StringType, degrade: Collection[str] | None = None) -> SchemaNode:
        degrade = self.string_checks if degrade is None else degrade
        kept, constraints = split_checks(node.checks, degrade, _STRING_CONSTRAINTS)
        self._log_degraded(node, constraints)
        return replace(
            node,
            checks=kept,
            description=merge_parameter_description(node.description, constraints),
        )

    def handle_number(self, node: NumberType, degrade: Collection[str] | None = None) -> SchemaNode:
        degrade = self.number_checks if degrade is None else degrade
        kept, constraints = split_checks(node.checks, degrade, _NUMBER_CONSTRAINTS)
        self._log_degraded(node, constraints)
        return replace(
            node,
            checks=kept,
            description=merge_parameter_description(node.description, constraints),
        )

    def handle_date(self, node: DateType) -> SchemaNode:
        constraints: Constraints = []
        for check in node.checks:
            if check.kind == "min":
                constraints.append(("minDate", _iso(check.value)))
            elif check.kind == "max":
                constraints.append(("maxDate", _iso(check.value)))
        constraints.append(("dateFormat", "date-time"))
        return StringType(
            description=merge_parameter_description(node.description, constraints),
            nullable=node.nullable,
        )

    def handle_any(self, node: AnyType) -> SchemaNode:
        # Casting "any" to every possible type is unreasonable; a string is
        # the one shape every provider accepts.
        return StringType(
            description=append_description(node.description, ANY_CAST_NOTE),
            nullable=node.nullable,
        )

    def handle_unsupported(self, node: SchemaNode) -> SchemaNode:
        builtin = type(node) in NODE_TYPES and not isinstance(node, UnsupportedType)
        if builtin and node.kind not in self.unsupported_kinds:
            return node
        kind = effective_kind(node)
        shape = node_signature(node)
        detail = f" ({shape})" if shape != kind else ""
        logger.debug("%s cast unsupported %s to string", self.name, kind)
        return StringType(
            description=append_description(
                node.description,
                f'Argument was {_article(kind)} "{kind}" type{detail}, but you (the LLM) do not support '
                f'"{kind}", so it was cast to a "string" type',
            ),
            nullable=node.nullable,
        )

    def _log_degraded(self, node: SchemaNode, constraints: Constraints) -> None:
        if constraints:
            names = ", ".join(name for name, _ in constraints)
            logger.debug("%s moved %s checks into description: %s", self.name, node.kind, names)
