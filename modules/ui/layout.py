"""Gradio layout composition for the prompt workshop and its history."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

try:
    import gradio as gr
except ImportError:  # pragma: no cover
    gr = None  # type: ignore

from config.settings import AppConfig
from modules.optimization.generation_client import GenerationClient
from modules.optimization.prompt_templates import PromptTemplateRegistry, default_templates
from modules.optimization.request_builder import PromptType, SkillLevel, Tone
from modules.services.generation_controller import GenerationController
from modules.services.history_service import HistoryStore
from modules.services.storage_service import JsonFileStorage
from modules.ui.callbacks import HISTORY_HEADERS, build_callbacks


def _load_template_registry(config: AppConfig) -> PromptTemplateRegistry:
    registry = PromptTemplateRegistry()
    registry.load_from_file(Path(config.assets_dir) / "templates.json")
    if not registry.list_templates():
        for template in default_templates():
            registry.add(template)
    return registry


def _values(enum_cls: Any) -> Sequence[str]:
    return [member.value for member in enum_cls]


def build_controller(config: AppConfig) -> GenerationController:
    """Wire the generation client and the file-backed history together."""
    history = HistoryStore(JsonFileStorage(Path(config.data_dir)), limit=config.history_limit)
    return GenerationController(GenerationClient(config), history)


def build_app(config: AppConfig) -> Any:
    """Compose and return the Gradio application."""
    if gr is None:
        raise RuntimeError("Gradio is not installed. Install the project dependencies first.")

    controller = build_controller(config)
    registry = _load_template_registry(config)
    callbacks_map = build_callbacks(config, controller, templates=registry)

    backend_choices = controller.client.available_backends() or ["gemini", "gpt", "claude"]
    default_backend = controller.client.default_backend()
    if default_backend not in backend_choices:
        backend_choices = [default_backend, *backend_choices]
    template_names = [template.name for template in registry.list_templates()]
    initial_rows, initial_choices = callbacks_map["on_refresh_history"]()

    def _history_select(choices: list[tuple[str, str]]) -> Any:
        return gr.Dropdown(choices=choices, value=None)

    async def generate(idea, prompt_type, tone, level, backend):
        text, metrics, status, rows, choices = await callbacks_map["on_generate"](
            idea, prompt_type, tone, level, backend
        )
        return text, metrics, status, rows, _history_select(choices)

    async def replay(item_id, backend):
        *fields, rows, choices = await callbacks_map["on_replay"](item_id, backend)
        return (*fields, rows, _history_select(choices))

    def delete(item_id):
        status, rows, choices = callbacks_map["on_delete"](item_id)
        return status, rows, _history_select(choices)

    def clear(confirmed):
        status, rows, choices = callbacks_map["on_clear"](confirmed)
        return status, rows, _history_select(choices), False

    with gr.Blocks(title="PromptForge AI") as demo:
        gr.Markdown("## PromptForge AI")
        status = gr.Markdown("Ready.")

        with gr.Tab("Generate"):
            with gr.Row():
                with gr.Column():
                    with gr.Row():
                        template_select = gr.Dropdown(
                            label="Quick start",
                            choices=template_names,
                            value=None,
                        )
                        apply_template_btn = gr.Button("Use template")
                    idea = gr.Textbox(
                        label="Your idea",
                        lines=5,
                        max_length=1000,
                        placeholder="Describe what you want the AI to do",
                    )
                    with gr.Row():
                        prompt_type = gr.Dropdown(
                            label="Prompt type",
                            choices=_values(PromptType),
                            value=PromptType.CHATBOT.value,
                        )
                        tone = gr.Dropdown(
                            label="Tone",
                            choices=_values(Tone),
                            value=Tone.PROFESSIONAL.value,
                        )
                        level = gr.Dropdown(
                            label="Skill level",
                            choices=_values(SkillLevel),
                            value=SkillLevel.BEGINNER.value,
                        )
                    backend_select = gr.Dropdown(
                        label="Model backend",
                        choices=backend_choices,
                        value=default_backend,
                    )
                    with gr.Row():
                        new_prompt_btn = gr.Button("New prompt")
                        generate_btn = gr.Button("Optimize prompt", variant="primary")

                with gr.Column():
                    result = gr.Textbox(
                        label="Optimized prompt",
                        lines=16,
                        interactive=False,
                        show_copy_button=True,
                    )
                    metrics = gr.Markdown("")
                    export_btn = gr.Button("Download as markdown")
                    export_file = gr.File(label="Export", interactive=False)

        with gr.Tab("History"):
            history_table = gr.Dataframe(
                headers=HISTORY_HEADERS,
                value=initial_rows,
                interactive=False,
                wrap=True,
            )
            history_select = gr.Dropdown(label="Entry", choices=initial_choices, value=None)
            with gr.Row():
                restore_btn = gr.Button("Load")
                replay_btn = gr.Button("Regenerate", variant="primary")
                delete_btn = gr.Button("Delete")
            with gr.Row():
                confirm_clear = gr.Checkbox(label="I understand clearing history is permanent", value=False)
                clear_btn = gr.Button("Clear all history", variant="stop")

        apply_template_btn.click(
            fn=callbacks_map["on_apply_template"],
            inputs=[template_select],
            outputs=[idea, status],
        )

        generate_btn.click(
            fn=generate,
            inputs=[idea, prompt_type, tone, level, backend_select],
            outputs=[result, metrics, status, history_table, history_select],
        )

        new_prompt_btn.click(
            fn=callbacks_map["on_new_prompt"],
            inputs=[],
            outputs=[idea, result, metrics, status],
        )

        export_btn.click(
            fn=callbacks_map["on_export"],
            inputs=[result],
            outputs=[export_file, status],
        )

        restore_btn.click(
            fn=callbacks_map["on_restore"],
            inputs=[history_select],
            outputs=[idea, prompt_type, tone, level, result, metrics, status],
        )

        replay_btn.click(
            fn=replay,
            inputs=[history_select, backend_select],
            outputs=[
                idea,
                prompt_type,
                tone,
                level,
                result,
                metrics,
                status,
                history_table,
                history_select,
            ],
        )

        delete_btn.click(
            fn=delete,
            inputs=[history_select],
            outputs=[status, history_table, history_select],
        )

        clear_btn.click(
            fn=clear,
            inputs=[confirm_clear],
            outputs=[status, history_table, history_select, confirm_clear],
        )

    return demo
