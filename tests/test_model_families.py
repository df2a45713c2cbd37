import pytest

from schemacompat.core.compat import model_families as mf
from schemacompat.core.providers.base import ModelDescriptor


@pytest.mark.parametrize(
    "provider,model_id,expected",
    [
        ("openai", "gpt-4o", True),
        ("azure", "openai/gpt-4.1", True),
        ("anthropic", "claude-3-opus", False),
        ("google", "gemini-2.0-flash", False),
    ],
)
def test_is_openai_model(provider, model_id, expected):
    assert mf.is_openai_model(ModelDescriptor(provider, model_id)) is expected


@pytest.mark.parametrize(
    "model_id,expected",
    [
        ("o3", True),
        ("o3-mini", True),
        ("o4-mini-2025-04-16", True),
        ("gpt-4o", False),
        ("gpt-4o-mini", False),
        ("gpt-3.5-turbo", False),
        ("o1-preview", False),
    ],
)
def test_is_openai_reasoning_model(model_id, expected):
    assert mf.is_openai_reasoning_model(ModelDescriptor("openai", model_id)) is expected


@pytest.mark.parametrize(
    "model_id,expected",
    [("gpt-4o-mini", True), ("gpt-4o-mini-2024-07-18", True), ("gpt-4o", False), ("gpt-3.5-turbo", False)],
)
def test_rejects_regex_checks(model_id, expected):
    assert mf.rejects_regex_checks(ModelDescriptor("openai", model_id)) is expected


@pytest.mark.parametrize(
    "model_id,anthropic,optional_strings",
    [
        ("claude-3-5-sonnet-20241022", True, False),
        ("claude-3.5-haiku", True, True),
        ("claude-3.5-haiku-latest", True, True),
        ("claude-3-haiku", True, False),
        ("gpt-4o", False, False),
    ],
)
def test_anthropic_families(model_id, anthropic, optional_strings):
    model = ModelDescriptor("anthropic", model_id)
    assert mf.is_anthropic_model(model) is anthropic
    assert mf.accepts_optional_strings(model) is optional_strings


@pytest.mark.parametrize(
    "provider,model_id,expected",
    [
        ("google", "gemini-2.5-flash", True),
        ("vertex", "gemini-1.5-pro", True),
        ("openrouter", "google/gemma-2", True),
        ("openai", "gpt-4o", False),
    ],
)
def test_is_google_model(provider, model_id, expected):
    assert mf.is_google_model(ModelDescriptor(provider, model_id)) is expected
