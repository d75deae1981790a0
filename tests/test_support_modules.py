"""Configuration, template and export helper tests."""

from __future__ import annotations

import json

import pytest

from config.settings import GEMINI_OPENAI_BASE_URL, AppConfig, load_config
from modules.optimization.prompt_templates import PromptTemplateRegistry
from modules.utils.export import export_filename, export_markdown

ENV_NAMES = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_BASE_URL",
    "GEMINI_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "PROMPTFORGE_BACKEND",
    "PROMPTFORGE_DATA_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch also undoes values written by load_config.
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield monkeypatch


def test_load_config_reads_env_file(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# provider\n"
        "GEMINI_API_KEY=\"g-key\"\n"
        "OPENAI_MODEL=gpt-test\n"
        "PROMPTFORGE_BACKEND=Gemini\n"
        f"PROMPTFORGE_DATA_DIR={tmp_path / 'data'}\n",
        encoding="utf-8",
    )

    config = load_config(str(env_file))

    assert config.gemini_key == "g-key"
    assert config.credential_for("gemini") == "g-key"
    assert config.credential_for("claude") is None
    assert config.default_backend == "gemini"
    assert config.data_dir == tmp_path / "data"
    assert config.metadata["openai_model"] == "gpt-test"
    assert config.metadata["gemini_base_url"] == GEMINI_OPENAI_BASE_URL


def test_load_config_without_env_file(tmp_path, clean_env):
    config = load_config(str(tmp_path / "missing.env"))

    assert config.gemini_key is None
    assert config.openai_key is None
    assert config.default_backend is None
    assert config.history_limit == 50


def test_app_config_sampling_defaults():
    config = AppConfig()

    assert config.temperature == pytest.approx(0.7)
    assert config.top_p == pytest.approx(0.95)


def test_template_registry_loads_file(tmp_path):
    path = tmp_path / "templates.json"
    path.write_text(json.dumps([{"name": "Poem", "idea": "A haiku about rain"}]), encoding="utf-8")
    registry = PromptTemplateRegistry()

    registry.load_from_file(path)
    registry.load_from_file(tmp_path / "absent.json")

    assert [template.name for template in registry.list_templates()] == ["Poem"]
    with pytest.raises(KeyError):
        registry.get("Story")


def test_export_filename_uses_epoch_milliseconds():
    assert export_filename(1_700_000_000.123) == "optimized-prompt-1700000000123.md"


def test_export_markdown_creates_directory(tmp_path):
    path = export_markdown("Role: x", tmp_path / "out", now=1.5)

    assert path.name == "optimized-prompt-1500.md"
    assert path.read_text(encoding="utf-8") == "Role: x"
