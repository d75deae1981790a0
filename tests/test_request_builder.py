"""RequestBuilder unit tests."""

from __future__ import annotations

import pytest

from modules.optimization.request_builder import (
    MAX_IDEA_LENGTH,
    PromptRequest,
    PromptType,
    SkillLevel,
    Tone,
    ValidationError,
    ValidationErrorKind,
    build_request,
)


def test_build_request_trims_idea_and_accepts_string_options():
    request = build_request("  build a chatbot \n", "Chatbot", "Professional", "Beginner")

    assert request == PromptRequest(
        idea="build a chatbot",
        type=PromptType.CHATBOT,
        tone=Tone.PROFESSIONAL,
        level=SkillLevel.BEGINNER,
    )


def test_build_request_accepts_enum_members():
    request = build_request("plot sales", PromptType.DATA_ANALYSIS, Tone.CASUAL, SkillLevel.EXPERT)

    assert request.type is PromptType.DATA_ANALYSIS
    assert request.tone is Tone.CASUAL
    assert request.level is SkillLevel.EXPERT


@pytest.mark.parametrize("idea", ["", "   ", "\n\t", None])
def test_build_request_rejects_blank_idea(idea):
    with pytest.raises(ValidationError) as excinfo:
        build_request(idea, "Chatbot", "Formal", "Beginner")

    assert excinfo.value.kind is ValidationErrorKind.EMPTY_IDEA
    assert "describe" in str(excinfo.value)


def test_build_request_rejects_overlong_idea():
    with pytest.raises(ValidationError) as excinfo:
        build_request("x" * (MAX_IDEA_LENGTH + 1), "Writing", "Formal", "Beginner")

    assert excinfo.value.kind is ValidationErrorKind.IDEA_TOO_LONG


def test_build_request_counts_code_points_not_bytes():
    request = build_request("é" * MAX_IDEA_LENGTH, "Writing", "Formal", "Beginner")

    assert len(request.idea) == MAX_IDEA_LENGTH


def test_build_request_rejects_unknown_option():
    with pytest.raises(ValidationError) as excinfo:
        build_request("an idea", "Poetry", "Formal", "Beginner")

    assert excinfo.value.kind is ValidationErrorKind.INVALID_OPTION
    assert "Image Generation" in str(excinfo.value)


def test_prompt_request_is_immutable():
    request = build_request("an idea", "Writing", "Formal", "Beginner")

    with pytest.raises(AttributeError):
        request.idea = "changed"  # type: ignore[misc]


def test_prompt_request_dict_uses_display_values():
    request = build_request("draw a cat", "Image Generation", "Casual", "Intermediate")

    assert request.to_dict() == {
        "idea": "draw a cat",
        "type": "Image Generation",
        "tone": "Casual",
        "level": "Intermediate",
    }
    assert PromptRequest.from_dict(request.to_dict()) == request
