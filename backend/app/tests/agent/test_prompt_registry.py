import pytest

from app.agent.prompt_registry import (
    AI_NAME,
    DEFAULT_CONTEXT,
    GENERAL_TEMPLATE,
    NOT_SPECIFIED,
    context_catalog,
    find_template,
    resolve_prompt,
)


@pytest.mark.parametrize(
    "label,expected",
    [
        ("refinement", "refinement"),
        ("Project Refinement", "refinement"),
        ("TECH RECOMMENDATION", "technology"),
        ("feature brainstorming", "features"),
        ("project timeline", "timeline"),
        ("debugging", "problem solving"),
        ("problem-solving", "problem solving"),
    ],
)
def test_find_template_matches_synonyms_case_insensitively(label, expected):
    template = find_template(label)
    assert template is not None
    assert template.name == expected


@pytest.mark.parametrize("context", ["underwater basket weaving", "", None])
def test_unknown_context_falls_back_to_general_template(context):
    resolved = resolve_prompt(context, {"skillLevel": "expert"})

    assert resolved.is_fallback
    assert resolved.template is GENERAL_TEMPLATE
    assert resolved.params == {"aiName": AI_NAME, "context": context or DEFAULT_CONTEXT}


def test_fallback_prompt_carries_raw_context_label():
    resolved = resolve_prompt("Blockchain Voting Ideas")
    system = resolved.template.format_system(resolved.params)

    assert "Current context: Blockchain Voting Ideas" in system
    assert AI_NAME in system


def test_missing_slots_default_to_not_specified():
    resolved = resolve_prompt("technology", {"projectType": "mobile game"})

    assert resolved.params["projectType"] == "mobile game"
    assert resolved.params["experienceLevel"] == NOT_SPECIFIED
    assert resolved.params["requirements"] == NOT_SPECIFIED
    assert resolved.params["learningStyle"] == NOT_SPECIFIED


def test_blank_unknown_and_non_string_params_are_tolerated():
    resolved = resolve_prompt(
        "timeline",
        {"timePerWeek": 10, "complexity": "", "projectDetails": None, "unrelated": "x"},
    )

    assert resolved.params["timePerWeek"] == "10"
    assert resolved.params["complexity"] == NOT_SPECIFIED
    assert resolved.params["projectDetails"] == NOT_SPECIFIED
    assert "unrelated" not in resolved.params


@pytest.mark.parametrize("context", ["refinement", "technology", "features", "timeline", "debugging", "anything"])
def test_every_template_formats_with_empty_params(context):
    resolved = resolve_prompt(context, {})
    messages = resolved.template.format_messages(resolved.params, "hello")

    assert [m.role for m in messages] == ["system", "human"]
    assert "{" not in messages[0].content
    assert messages[1].content == "hello"


def test_context_catalog_lists_general_first_with_slot_names():
    catalog = context_catalog()

    assert [entry["name"] for entry in catalog] == [
        "general",
        "refinement",
        "technology",
        "features",
        "timeline",
        "problem solving",
    ]
    assert catalog[0]["parameters"] == []
    assert catalog[1]["parameters"] == ["projectContext", "skillLevel", "timeframe"]
    assert catalog[5]["parameters"] == [
        "currentIssue",
        "techStack",
        "errorDetails",
        "attemptedSolutions",
    ]
