"""Quick-start idea templates."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List


@dataclass(slots=True)
class PromptTemplate:
    """A named starter idea the user can drop into the form."""

    name: str
    idea: str


def default_templates() -> List[PromptTemplate]:
    return [
        PromptTemplate(
            name="Customer Support Bot",
            idea="A friendly support assistant that answers billing questions for a SaaS product.",
        ),
        PromptTemplate(
            name="Product Photo",
            idea="A studio photo of a minimalist ceramic coffee mug on a marble counter.",
        ),
        PromptTemplate(
            name="Code Reviewer",
            idea="Review Python pull requests for bugs, readability and missing tests.",
        ),
        PromptTemplate(
            name="Blog Outline",
            idea="Outline a blog post explaining vector databases to web developers.",
        ),
        PromptTemplate(
            name="Sales Insights",
            idea="Find trends and anomalies in monthly sales data exported as CSV.",
        ),
    ]


class PromptTemplateRegistry:
    """In-memory registry of quick-start templates."""

    def __init__(self) -> None:
        self._templates: Dict[str, PromptTemplate] = {}

    def load_from_file(self, path: Path) -> None:
        """Load templates from a JSON file."""
        if not path.exists():
            return
        with path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        for entry in data:
            self.add(PromptTemplate(name=entry["name"], idea=entry.get("idea", "")))

    def add(self, template: PromptTemplate) -> None:
        """Register a new template."""
        self._templates[template.name] = template

    def list_templates(self) -> List[PromptTemplate]:
        """Return all registered templates."""
        return list(self._templates.values())

    def get(self, name: str) -> PromptTemplate:
        """Retrieve a template by name."""
        try:
            return self._templates[name]
        except KeyError as exc:
            raise KeyError(f"Prompt template '{name}' not found") from exc
