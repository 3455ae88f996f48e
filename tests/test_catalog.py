import pytest
from pydantic import ValidationError
from codehelper.catalog import PromptCatalog, PromptSpec
from codehelper.constants import DEBUG_PROMPT, FOOD_REVIEW_PROMPT, REVIEW_PROMPT

def test_default_catalog_operations():
    catalog = PromptCatalog.default()
    assert catalog.operation_ids() == ["review", "describe", "clean", "debug", "foodreview"]
    assert len(catalog) == 5

@pytest.mark.parametrize("operation_id, field", [
    ("review", "reviewed"),
    ("describe", "describe"),
    ("clean", "clean"),
    ("debug", "debug"),
    ("foodreview", "reviewed"),
])
def test_response_fields(operation_id, field):
    spec = PromptCatalog.default().lookup(operation_id)
    assert spec.operation_id == operation_id
    assert spec.response_field == field

def test_lookup_prompts():
    catalog = PromptCatalog.default()
    assert catalog.lookup("review").system_prompt == REVIEW_PROMPT
    assert catalog.lookup("debug").system_prompt == DEBUG_PROMPT
    # The cooking persona still answers under "reviewed"
    assert catalog.lookup("foodreview").system_prompt == FOOD_REVIEW_PROMPT
    assert "chef" in FOOD_REVIEW_PROMPT

def test_lookup_unknown_returns_none():
    assert PromptCatalog.default().lookup("translate") is None

def test_duplicate_operation_id_rejected():
    with pytest.raises(ValueError):
        PromptCatalog.from_triples([
            ("review", "a", "reviewed"),
            ("review", "b", "other"),
        ])

def test_prompt_spec_is_immutable():
    spec = PromptSpec(operation_id="x", system_prompt="p", response_field="f")
    with pytest.raises(ValidationError):
        spec.system_prompt = "changed"

@pytest.mark.parametrize("operation_id", ["review", "describe", "clean", "debug", "foodreview"])
def test_prompts_have_no_surrounding_newlines(operation_id):
    prompt = PromptCatalog.default().lookup(operation_id).system_prompt
    assert prompt == prompt.strip()
    assert prompt.lstrip("“").startswith("You are")
