"""Gradio UI callback tests."""

from __future__ import annotations

import asyncio
from typing import Optional

from config.settings import AppConfig
from modules.optimization.generation_client import ProviderError
from modules.optimization.prompt_templates import PromptTemplate, PromptTemplateRegistry
from modules.optimization.request_builder import PromptRequest
from modules.services.generation_controller import GenerationController, GenerationStatus
from modules.services.history_service import HistoryStore
from modules.services.storage_service import MemoryStorage
from modules.ui import callbacks


class DummyClient:
    """Minimal generation client stub returning fixed prompts."""

    def __init__(self) -> None:
        self.calls: list[tuple[PromptRequest, Optional[str]]] = []
        self.should_fail = False

    async def generate(self, request: PromptRequest, backend: Optional[str] = None) -> str:
        self.calls.append((request, backend))
        if self.should_fail:
            raise ProviderError("Failed to communicate with the generation service.")
        return f"Role: assistant\nGoal: {request.idea}\nOutput Format: list"


def build_callbacks(
    *,
    client: DummyClient | None = None,
    registry: PromptTemplateRegistry | None = None,
    config: AppConfig | None = None,
):
    config = config or AppConfig()
    controller = GenerationController(client or DummyClient(), HistoryStore(MemoryStorage()))
    return callbacks.build_callbacks(config, controller, templates=registry), controller


def test_on_generate_success_updates_result_and_history():
    client = DummyClient()
    cb_map, controller = build_callbacks(client=client)

    text, metrics, status, rows, choices = asyncio.run(
        cb_map["on_generate"]("summarize emails", "Writing", "Casual", "Beginner", "gpt")
    )

    assert text.endswith("Output Format: list")
    assert "Structured:** yes" in metrics
    assert "optimized" in status
    assert rows[0][1:] == ["Writing", "Casual", "Beginner", "summarize emails"]
    assert choices[0][1] == controller.history.items[0].id
    assert client.calls[0][1] == "gpt"


def test_on_generate_validation_error_skips_client():
    client = DummyClient()
    cb_map, controller = build_callbacks(client=client)

    text, metrics, status, rows, _ = asyncio.run(
        cb_map["on_generate"]("   ", "Writing", "Casual", "Beginner")
    )

    assert text == ""
    assert "Please describe" in status
    assert client.calls == []
    assert rows == []
    assert controller.outcome.status is GenerationStatus.IDLE


def test_on_generate_provider_failure_reports_error():
    client = DummyClient()
    client.should_fail = True
    cb_map, controller = build_callbacks(client=client)

    text, metrics, status, rows, _ = asyncio.run(
        cb_map["on_generate"]("an idea", "Chatbot", "Formal", "Expert")
    )

    assert text == ""
    assert metrics == ""
    assert status.startswith("Error:")
    assert rows == []


def test_on_replay_and_restore_use_stored_request():
    client = DummyClient()
    cb_map, controller = build_callbacks(client=client)
    asyncio.run(cb_map["on_generate"]("draft a poem", "Writing", "Formal", "Expert"))
    item_id = controller.history.items[0].id

    restored = cb_map["on_restore"](item_id)
    assert restored[:4] == ("draft a poem", "Writing", "Formal", "Expert")
    assert "Goal: draft a poem" in restored[4]
    assert len(client.calls) == 1

    replayed = asyncio.run(cb_map["on_replay"](item_id))
    assert replayed[0] == "draft a poem"
    assert len(client.calls) == 2
    assert len(replayed[7]) == 2
    assert controller.history.get(item_id) is not None


def test_on_replay_requires_selection():
    cb_map, _ = build_callbacks()

    replayed = asyncio.run(cb_map["on_replay"](None))

    assert "Select a history entry" in replayed[6]


def test_on_delete_and_clear():
    cb_map, controller = build_callbacks()
    asyncio.run(cb_map["on_generate"]("one", "Writing", "Formal", "Expert"))
    asyncio.run(cb_map["on_generate"]("two", "Writing", "Formal", "Expert"))

    status, rows, choices = cb_map["on_delete"](controller.history.items[0].id)
    assert status == "Entry deleted."
    assert [row[4] for row in rows] == ["one"]

    status, rows, _ = cb_map["on_clear"](False)
    assert "permanent" in status
    assert len(rows) == 1

    status, rows, choices = cb_map["on_clear"](True)
    assert status == "History cleared successfully."
    assert rows == []
    assert choices == []


def test_on_new_prompt_clears_form_and_keeps_history():
    cb_map, controller = build_callbacks()
    asyncio.run(cb_map["on_generate"]("one", "Writing", "Formal", "Expert"))
    assert controller.outcome.status is GenerationStatus.SUCCESS

    assert cb_map["on_new_prompt"]() == ("", "", "", "Ready.")
    assert controller.outcome.status is GenerationStatus.IDLE
    assert controller.metrics is None
    assert len(controller.history) == 1


def test_on_apply_template():
    registry = PromptTemplateRegistry()
    registry.add(PromptTemplate(name="Tutor", idea="Explain recursion to a child."))
    cb_map, _ = build_callbacks(registry=registry)

    idea, status = cb_map["on_apply_template"]("Tutor")
    assert idea == "Explain recursion to a child."
    assert status == ""

    idea, status = cb_map["on_apply_template"]("Missing")
    assert idea == ""
    assert "Unknown template" in status


def test_default_templates_are_registered_when_empty():
    registry = PromptTemplateRegistry()
    cb_map, _ = build_callbacks(registry=registry)

    assert registry.list_templates()
    idea, _ = cb_map["on_apply_template"]("Code Reviewer")
    assert "pull requests" in idea


def test_on_export_writes_markdown(tmp_path):
    cb_map, _ = build_callbacks(config=AppConfig(export_dir=tmp_path))

    path, status = cb_map["on_export"]("Role: x")

    assert path is not None
    assert path.endswith(".md")
    assert "optimized-prompt-" in path
    assert "Saved" in status

    path, status = cb_map["on_export"]("   ")
    assert path is None
    assert "Nothing to export" in status
