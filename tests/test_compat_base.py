import datetime as dt
from dataclasses import dataclass
from typing import ClassVar

import pytest

from schemacompat.core.compat.base import ANY_CAST_NOTE, JSON_SCHEMA_7, SchemaCompatLayer, merge_parameter_description
from schemacompat.core.errors import SchemaConstructionError, SchemaError
from schemacompat.core.models.schema_defs import (
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
    UnionType,
    UnsupportedType,
)
from schemacompat.core.providers.base import ModelDescriptor

MODEL = ModelDescriptor(provider="test", model_id="test-model")


class PlainLayer(SchemaCompatLayer):
    def get_schema_target(self):
        return JSON_SCHEMA_7

    def should_apply(self):
        return True


class TupleFriendlyLayer(PlainLayer):
    unsupported_kinds = frozenset({"never", "undefined"})


@dataclass(frozen=True)
class IntersectionType(SchemaNode):
    kind: ClassVar[str] = "intersection"


def _layer():
    return PlainLayer(MODEL)


def test_merge_parameter_description():
    assert merge_parameter_description(None, {}) is None
    assert merge_parameter_description("d", {}) == "d"
    assert merge_parameter_description("d", {"defaultValue": 5, "minLength": 2}) == "d\ndefault value: 5; min length: 2"


def test_object_keeps_field_order_and_demotes_optionals():
    node = ObjectType({"b": StringType(), "a": OptionalType(NumberType()), "c": BooleanType()})
    out = _layer().transform(node)
    assert list(out.fields) == ["b", "a", "c"]
    assert out.required == frozenset({"b", "c"})
    assert out.fields["a"] == NumberType(nullable=True)


def test_optional_field_in_required_set_is_demoted():
    node = ObjectType({"foo": OptionalType(StringType())}, required={"foo"})
    out = _layer().transform(node)
    assert out == ObjectType({"foo": StringType(nullable=True)}, required=frozenset())


def test_optional_keeps_both_descriptions():
    out = _layer().transform(OptionalType(StringType(description="inner"), description="outer"))
    assert out == StringType(description="inner\nouter", nullable=True)


def test_optional_outside_allow_list_becomes_nullable_string():
    node = OptionalType(NumberType((Check("int"),)), description="count")
    out = _layer().handle_optional(node, allowed_kinds={"string"})
    assert isinstance(out, StringType)
    assert out.nullable is True
    assert out.description == (
        "int: true\n"
        'Argument was an optional "number" type, but you (the LLM) do not support optional "number", '
        'so it was cast to a nullable "string" type\n'
        "count"
    )


def test_default_value_is_noted():
    out = _layer().transform(DefaultType(NumberType(), 5))
    assert out == NumberType(description="default value: 5")


def test_default_appends_to_inner_description():
    node = DefaultType(StringType(description="name"), lambda: "anon", description="who")
    out = _layer().transform(node)
    assert out.description == 'name\nwho\ndefault value: "anon"'


def test_default_accessor_failure_is_fatal():
    def boom():
        raise RuntimeError("no default")

    with pytest.raises(SchemaConstructionError):
        _layer().transform(ObjectType({"x": DefaultType(NumberType(), boom)}))
    assert issubclass(SchemaConstructionError, SchemaError)


def test_string_checks_move_into_description():
    node = StringType((Check("regex", "^a+$"), Check("min", 2)), description="code")
    out = _layer().transform(node)
    assert out == StringType(description='code\nregex: "^a+$"; min length: 2')


def test_string_handler_keeps_checks_outside_degrade_list():
    node = StringType((Check("regex", "^a+$"), Check("emoji")))
    out = _layer().handle_string(node, ["emoji"])
    assert out.checks == (Check("regex", "^a+$"),)
    assert out.description == "emoji: true"


def test_number_bounds_degrade_but_int_is_kept():
    node = NumberType((Check("int"), Check("gte", 1), Check("lt", 10)))
    out = _layer().transform(node)
    assert out.checks == (Check("int"),)
    assert out.description == "greater than or equal to: 1; less than: 10"


def test_array_checks_and_element():
    node = ArrayType(AnyType(), (Check("min", 1),), description="items")
    out = _layer().transform(node)
    assert out == ArrayType(StringType(description=ANY_CAST_NOTE), description="items\nmin length: 1")


def test_date_becomes_described_string():
    node = DateType((Check("min", dt.date(2024, 1, 1)),), description="when")
    out = _layer().transform(node)
    assert out == StringType(description='when\nmin date: "2024-01-01"; date format: "date-time"')


def test_any_is_cast_to_string():
    out = _layer().transform(AnyType(description="data"))
    assert out == StringType(
        description='data\nArgument was an "any" type, but you (the LLM) do not support "any", '
        'so it was cast to a "string" type'
    )
    assert _layer().transform(AnyType()).description == ANY_CAST_NOTE


def test_nullable_flag_survives_degradation():
    assert _layer().transform(AnyType(nullable=True)).nullable is True
    assert _layer().transform(DateType(nullable=True)).nullable is True


def test_unsupported_kinds_degrade_to_string():
    out = _layer().transform(UnsupportedType(original_kind="intersection", description="x"))
    assert out.description == (
        'x\nArgument was an "intersection" type, but you (the LLM) do not support "intersection", '
        'so it was cast to a "string" type'
    )
    never = _layer().transform(NeverType())
    assert never.description.startswith('Argument was a "never" type')


def test_unknown_node_class_degrades_to_string():
    out = _layer().transform(IntersectionType(description="both"))
    assert isinstance(out, StringType)
    assert out.description.startswith("both\n")
    assert '"intersection"' in out.description


def test_tuple_degrades_with_its_shape():
    out = _layer().transform(TupleType((StringType(), NumberType())))
    assert out == StringType(
        description='Argument was a "tuple" type (tuple[string, number]), but you (the LLM) do not support '
        '"tuple", so it was cast to a "string" type'
    )


def test_tuple_kept_when_layer_allows_it():
    node = TupleType((StringType(("emoji",)), AnyType()))
    out = TupleFriendlyLayer(MODEL).transform(node)
    assert out == TupleType((StringType(description="emoji: true"), StringType(description=ANY_CAST_NOTE)))


def test_union_is_kept_and_variants_rewritten():
    node = UnionType((StringType(("emoji",)), NumberType()), description="either")
    out = _layer().transform(node)
    assert out == UnionType((StringType(description="emoji: true"), NumberType()), description="either")


def test_scalars_pass_through():
    layer = _layer()
    for node in (EnumType(("a", "b")), LiteralType("x"), BooleanType(description="flag")):
        assert layer.transform(node) is node


def test_non_node_input_is_rejected():
    with pytest.raises(SchemaError):
        _layer().transform({"type": "string"})


def test_input_tree_is_not_mutated():
    def build():
        return ObjectType(
            {"a": OptionalType(StringType(("emoji",), description="x")), "b": DefaultType(NumberType(), 1)}
        )

    tree = build()
    _layer().transform(tree)
    assert tree == build()


def test_merge_parameter_description_accepts_repeated_pairs():
    note = merge_parameter_description(None, [("minLength", 2), ("minLength", 3)])
    assert note == "min length: 2; min length: 3"


def test_repeated_number_and_date_bounds_are_all_kept():
    numbers = _layer().transform(NumberType((Check("gte", 1), Check("gte", 2))))
    assert numbers.description == "greater than or equal to: 1; greater than or equal to: 2"
    dates = _layer().transform(DateType((Check("min", "2024-01-01"), Check("min", "2024-06-01"))))
    assert dates.description == 'min date: "2024-01-01"; min date: "2024-06-01"; date format: "date-time"'
