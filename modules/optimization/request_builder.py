"""Form input validation and the immutable prompt request value."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Type, TypeVar

MAX_IDEA_LENGTH = 1000

E = TypeVar("E", bound=Enum)


class PromptType(str, Enum):
    """Kind of prompt the user wants to produce."""

    CHATBOT = "Chatbot"
    IMAGE = "Image Generation"
    CODE = "Code Generation"
    WRITING = "Writing"
    DATA_ANALYSIS = "Data Analysis"


class Tone(str, Enum):
    FORMAL = "Formal"
    CASUAL = "Casual"
    PROFESSIONAL = "Professional"


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    EXPERT = "Expert"


class ValidationErrorKind(str, Enum):
    EMPTY_IDEA = "empty_idea"
    IDEA_TOO_LONG = "idea_too_long"
    INVALID_OPTION = "invalid_option"


class ValidationError(ValueError):
    """Raised when form input cannot be turned into a PromptRequest."""

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True, slots=True)
class PromptRequest:
    """Normalized user intent submitted for generation."""

    idea: str
    type: PromptType = PromptType.CHATBOT
    tone: Tone = Tone.PROFESSIONAL
    level: SkillLevel = SkillLevel.BEGINNER

    def to_dict(self) -> Dict[str, str]:
        return {
            "idea": self.idea,
            "type": self.type.value,
            "tone": self.tone.value,
            "level": self.level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PromptRequest":
        """Rebuild a request from its serialized form, validating every field."""
        idea = data["idea"]
        if not isinstance(idea, str):
            raise TypeError(f"idea must be a string, got {type(idea).__name__}")
        return build_request(idea, data["type"], data["tone"], data["level"])


def _coerce_option(enum_cls: Type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            ValidationErrorKind.INVALID_OPTION,
            f"Unknown {field_name} '{value}'. Expected one of: {choices}.",
        ) from exc


def build_request(idea: str, type: Any, tone: Any, level: Any) -> PromptRequest:
    """Validate raw form values and return a PromptRequest."""
    trimmed = (idea or "").strip()
    if not trimmed:
        raise ValidationError(
            ValidationErrorKind.EMPTY_IDEA,
            "Please describe what you want the AI to do.",
        )
    if len(trimmed) > MAX_IDEA_LENGTH:
        raise ValidationError(
            ValidationErrorKind.IDEA_TOO_LONG,
            f"Please keep your idea under {MAX_IDEA_LENGTH} characters.",
        )

    return PromptRequest(
        idea=trimmed,
        type=_coerce_option(PromptType, type, "prompt type"),
        tone=_coerce_option(Tone, tone, "tone"),
        level=_coerce_option(SkillLevel, level, "skill level"),
    )
