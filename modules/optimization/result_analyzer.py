"""Lightweight display metrics for a generated prompt."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class PromptMetrics:
    """Derived quality hints shown next to a result."""

    complexity_score: int
    is_structured: bool
    has_format_section: bool


def analyze(text: Optional[str]) -> Optional[PromptMetrics]:
    """Return metrics for a result text, or None when there is no result."""
    if not text:
        return None

    # Half-up rounding, not Python's banker's rounding.
    complexity = min(int(math.floor(len(text) / 100 + 0.5)), 10)
    structured = "Role:" in text and ("Constraints:" in text or "Goal:" in text)
    return PromptMetrics(
        complexity_score=complexity,
        is_structured=structured,
        has_format_section="format" in text.lower(),
    )
