"""Configuration helpers for the PromptForge project."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass(slots=True)
class AppConfig:
    """Centralized application configuration."""

    assets_dir: Path = Path("assets")
    data_dir: Path = Path("data")
    export_dir: Path = Path("exports")
    log_dir: Path = Path("logs")
    gemini_key: Optional[str] = None
    openai_key: Optional[str] = None
    anthropic_key: Optional[str] = None
    default_backend: Optional[str] = None
    history_limit: int = 50
    temperature: float = 0.7
    top_p: float = 0.95
    max_output_tokens: int = 2048
    metadata: dict[str, Any] = field(default_factory=dict)

    def credential_for(self, backend: str) -> Optional[str]:
        """Return the API key configured for a backend name, if any."""
        keys = {
            "gemini": self.gemini_key,
            "gpt": self.openai_key,
            "claude": self.anthropic_key,
        }
        return keys.get(backend.lower())


def _load_env_file(path: Path) -> None:
    """Populate environment variables from a simple KEY=VALUE .env file."""
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ[key.strip()] = value.strip().strip('"').strip("'")


def _env_path(name: str, default: str) -> Path:
    return Path(os.getenv(name, default)).expanduser()


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Return an AppConfig instance with environment-aware settings."""
    env_path = Path(config_path) if config_path else Path(".env")
    _load_env_file(env_path)

    metadata: dict[str, Any] = {
        "gemini_base_url": os.getenv("GEMINI_BASE_URL") or GEMINI_OPENAI_BASE_URL,
    }

    optional_settings = {
        "gemini_model": "GEMINI_MODEL",
        "openai_base_url": "OPENAI_BASE_URL",
        "openai_model": "OPENAI_MODEL",
        "claude_model": "ANTHROPIC_MODEL",
    }
    for key, env_name in optional_settings.items():
        value = os.getenv(env_name)
        if value:
            metadata[key] = value

    backend = (os.getenv("PROMPTFORGE_BACKEND") or "").strip().lower() or None

    return AppConfig(
        assets_dir=_env_path("PROMPTFORGE_ASSETS_DIR", "assets"),
        data_dir=_env_path("PROMPTFORGE_DATA_DIR", "data"),
        export_dir=_env_path("PROMPTFORGE_EXPORT_DIR", "exports"),
        log_dir=_env_path("PROMPTFORGE_LOG_DIR", "logs"),
        gemini_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
        openai_key=os.getenv("OPENAI_API_KEY"),
        anthropic_key=os.getenv("ANTHROPIC_API_KEY"),
        default_backend=backend,
        metadata=metadata,
    )
