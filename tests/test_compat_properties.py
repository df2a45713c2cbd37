import datetime as dt

import pytest

from schemacompat.core.compat.anthropic import AnthropicSchemaCompatLayer
from schemacompat.core.compat.google import GoogleSchemaCompatLayer
from schemacompat.core.compat.openai import OpenAISchemaCompatLayer
from schemacompat.core.compat.openai_reasoning import OpenAIReasoningSchemaCompatLayer
from schemacompat.core.models.schema_defs import (
    AnyType,
    ArrayType,
    BooleanType,
    Check,
    DateType,
    DefaultType,
    EnumType,
    NeverType,
    NumberType,
    ObjectType,
    OptionalType,
    StringType,
    TupleType,
    UnionType,
    descendant_kinds,
    iter_nodes,
)
from schemacompat.core.providers.base import ModelDescriptor

FORBIDDEN_KINDS = {"any", "date", "optional", "default", "tuple", "never", "undefined", "unsupported"}

LAYERS = [
    (OpenAIReasoningSchemaCompatLayer, ModelDescriptor("openai", "o3-mini")),
    (OpenAISchemaCompatLayer, ModelDescriptor("openai", "gpt-4o-mini")),
    (AnthropicSchemaCompatLayer, ModelDescriptor("anthropic", "claude-3-5-sonnet")),
    (GoogleSchemaCompatLayer, ModelDescriptor("google", "gemini-2.5-flash")),
]


def rich_schema():
    return ObjectType(
        {
            "name": StringType((Check("regex", "^[a-z]+$"), Check("emoji"), Check("min", 2)), description="name"),
            "nick": OptionalType(StringType(description="nick")),
            "age": OptionalType(NumberType((Check("int"), Check("gte", 0)))),
            "tags": ArrayType(StringType(), (Check("max", 5),)),
            "payload": AnyType(description="payload"),
            "when": DateType((Check("min", dt.date(2024, 1, 1)),)),
            "pair": TupleType((StringType(), NumberType())),
            "choice": UnionType((StringType(), NumberType())),
            "mode": EnumType(("fast", "slow")),
            "retries": OptionalType(DefaultType(NumberType(), 3)),
            "extra": OptionalType(
                ObjectType({"flag": OptionalType(BooleanType()), "gone": OptionalType(NeverType())})
            ),
        },
        description="root",
    )


@pytest.fixture(params=LAYERS, ids=lambda p: p[0].__name__)
def layer(request):
    layer_cls, model = request.param
    return layer_cls(model)


def test_layers_apply_to_their_models(layer):
    assert layer.should_apply()


def test_output_has_no_forbidden_kinds(layer):
    out = layer.transform(rich_schema())
    assert not descendant_kinds(out) & FORBIDDEN_KINDS


def test_transform_is_a_fixed_point(layer):
    once = layer.transform(rich_schema())
    assert layer.transform(once) == once


def test_transform_is_deterministic(layer):
    assert layer.transform(rich_schema()) == layer.transform(rich_schema())


def test_required_names_are_consistent(layer):
    out = layer.transform(rich_schema())
    assert out.required == frozenset({"name", "tags", "payload", "when", "pair", "choice", "mode"})
    assert out.fields["extra"].required == frozenset()
    for node in iter_nodes(out):
        if isinstance(node, ObjectType):
            assert node.required <= set(node.fields)


def test_authored_descriptions_are_kept_as_prefix(layer):
    out = layer.transform(rich_schema())
    assert out.description == "root"
    assert out.fields["name"].description.startswith("name")
    assert out.fields["nick"].description.startswith("nick")
    assert out.fields["payload"].description.startswith("payload\n")


def test_optional_fields_become_nullable(layer):
    out = layer.transform(rich_schema())
    for name in ("nick", "age", "retries", "extra"):
        assert out.fields[name].nullable is True
    assert out.fields["name"].nullable is False


def test_default_value_is_noted(layer):
    out = layer.transform(DefaultType(NumberType(), 5))
    assert isinstance(out, NumberType)
    assert "default value: 5" in out.description


def test_legacy_mini_output_has_no_regex_or_emoji():
    layer = OpenAISchemaCompatLayer(ModelDescriptor("openai", "gpt-4o-mini"))
    out = layer.transform(rich_schema())
    for node in iter_nodes(out):
        kinds = {c.kind for c in getattr(node, "checks", ())}
        assert not kinds & {"regex", "emoji"}


def test_defaulted_optional_field_is_demoted(layer):
    node = ObjectType({"x": DefaultType(OptionalType(StringType()), "hi"), "y": StringType()})
    assert node.required == frozenset({"y"})
    out = layer.transform(ObjectType(node.fields, required={"x", "y"}))
    assert out.required == frozenset({"y"})
    assert out.fields["x"].nullable is True
    assert 'default value: "hi"' in out.fields["x"].description
