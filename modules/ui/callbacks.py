"""Callback implementations for the Gradio interface."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from config.settings import AppConfig
from modules.optimization.prompt_templates import PromptTemplateRegistry, default_templates
from modules.optimization.request_builder import ValidationError
from modules.optimization.result_analyzer import PromptMetrics
from modules.services.generation_controller import (
    GenerationController,
    GenerationOutcome,
    GenerationStatus,
)
from modules.services.history_service import HistoryItem
from modules.utils.export import export_markdown

HISTORY_HEADERS = ["Created", "Type", "Tone", "Level", "Idea"]


def format_metrics(metrics: Optional[PromptMetrics]) -> str:
    """Render metrics as a short markdown summary."""
    if metrics is None:
        return ""
    structured = "yes" if metrics.is_structured else "no"
    has_format = "yes" if metrics.has_format_section else "no"
    return (
        f"**Complexity:** {metrics.complexity_score}/10 · "
        f"**Structured:** {structured} · "
        f"**Output format:** {has_format}"
    )


def _history_label(item: HistoryItem) -> str:
    created = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    idea = item.request.idea
    preview = idea if len(idea) <= 48 else f"{idea[:45]}..."
    return f"{created} · {item.request.type.value} · {preview}"


def build_callbacks(
    config: AppConfig,
    controller: GenerationController,
    templates: Optional[PromptTemplateRegistry] = None,
) -> dict[str, Any]:
    """Return a dictionary of Gradio callback functions."""

    registry = templates or PromptTemplateRegistry()
    if not registry.list_templates():
        for template in default_templates():
            registry.add(template)

    def _history_rows() -> list[list[str]]:
        rows = []
        for item in controller.history.items:
            created = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
            rows.append(
                [
                    created,
                    item.request.type.value,
                    item.request.tone.value,
                    item.request.level.value,
                    item.request.idea,
                ]
            )
        return rows

    def _history_choices() -> list[tuple[str, str]]:
        return [(_history_label(item), item.id) for item in controller.history.items]

    def _render(outcome: GenerationOutcome) -> tuple[str, str, str]:
        if outcome.status is GenerationStatus.SUCCESS:
            return outcome.text or "", format_metrics(controller.metrics), "Prompt optimized."
        if outcome.status is GenerationStatus.ERROR:
            return "", "", f"Error: {outcome.message}"
        return "", "", "Ready."

    def on_refresh_history() -> tuple[list[list[str]], list[tuple[str, str]]]:
        return _history_rows(), _history_choices()

    async def on_generate(
        idea: str,
        prompt_type: str,
        tone: str,
        level: str,
        backend: Optional[str] = None,
    ) -> tuple[str, str, str, list[list[str]], list[tuple[str, str]]]:
        try:
            outcome = await controller.submit(idea, prompt_type, tone, level, backend=backend or None)
        except ValidationError as exc:
            return "", "", f"Error: {exc}", _history_rows(), _history_choices()
        return (*_render(outcome), _history_rows(), _history_choices())

    async def on_replay(
        item_id: Optional[str],
        backend: Optional[str] = None,
    ) -> tuple[str, str, str, str, str, str, str, list[list[str]], list[tuple[str, str]]]:
        item = controller.history.get(item_id) if item_id else None
        if item is None:
            return (
                "", "", "", "", "", "",
                "Select a history entry first.",
                _history_rows(),
                _history_choices(),
            )
        outcome = await controller.replay(item.id, backend=backend or None)
        text, metrics, status = _render(outcome)
        request = item.request
        return (
            request.idea,
            request.type.value,
            request.tone.value,
            request.level.value,
            text,
            metrics,
            status,
            _history_rows(),
            _history_choices(),
        )

    def on_restore(item_id: Optional[str]) -> tuple[str, str, str, str, str, str, str]:
        item = controller.history.get(item_id) if item_id else None
        if item is None:
            return "", "", "", "", "", "", "Select a history entry first."
        outcome = controller.restore(item.id)
        text, metrics, _ = _render(outcome)
        request = item.request
        return (
            request.idea,
            request.type.value,
            request.tone.value,
            request.level.value,
            text,
            metrics,
            "Loaded from history.",
        )

    def on_delete(item_id: Optional[str]) -> tuple[str, list[list[str]], list[tuple[str, str]]]:
        if not item_id:
            return "Select a history entry first.", _history_rows(), _history_choices()
        controller.history.remove(item_id)
        return "Entry deleted.", _history_rows(), _history_choices()

    def on_clear(confirmed: bool) -> tuple[str, list[list[str]], list[tuple[str, str]]]:
        if not confirmed:
            return (
                "Tick the confirmation box to clear all history. This action is permanent.",
                _history_rows(),
                _history_choices(),
            )
        controller.history.clear()
        return "History cleared successfully.", _history_rows(), _history_choices()

    def on_new_prompt() -> tuple[str, str, str, str]:
        controller.reset()
        return "", "", "", "Ready."

    def on_apply_template(name: str) -> tuple[str, str]:
        try:
            template = registry.get(name)
        except KeyError:
            return "", f"Unknown template: {name}"
        return template.idea, ""

    def on_export(text: str) -> tuple[Optional[str], str]:
        if not (text or "").strip():
            return None, "Nothing to export yet."
        try:
            path = export_markdown(text, config.export_dir)
        except OSError as exc:
            return None, f"Export failed: {exc}"
        return str(path), f"Saved {path.name}."

    return {
        "on_generate": on_generate,
        "on_replay": on_replay,
        "on_restore": on_restore,
        "on_delete": on_delete,
        "on_clear": on_clear,
        "on_apply_template": on_apply_template,
        "on_new_prompt": on_new_prompt,
        "on_export": on_export,
        "on_refresh_history": on_refresh_history,
    }
