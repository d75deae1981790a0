"""Prompt optimization via third-party LLM APIs."""

from __future__ import annotations

import asyncio
import importlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from config.settings import GEMINI_OPENAI_BASE_URL, AppConfig
from modules.optimization.request_builder import PromptRequest

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "Failed to generate optimized prompt."

SYSTEM_INSTRUCTION = (
    "You are an expert prompt engineer. Turn the user's rough idea into a single, "
    "production-ready prompt for a large language model.\n"
    "Always answer with these sections, each starting on its own line:\n"
    "Role: who the model should act as.\n"
    "Goal: what the model must achieve.\n"
    "Context: background the model needs.\n"
    "Constraints: rules, limits and things to avoid.\n"
    "Output Format: the exact shape of the expected answer.\n"
    "Match the requested tone and pitch the detail at the requested skill level. "
    "Return only the optimized prompt, without commentary."
)


class GenerationError(RuntimeError):
    """Base class for failures surfaced to the user as an error outcome."""


class MissingCredentialError(GenerationError):
    """No API key is configured for the selected backend."""


class ProviderError(GenerationError):
    """The provider call failed or the provider SDK is unusable."""


@dataclass(slots=True)
class BackendRequest:
    """Information passed to generation backends."""

    user_message: str
    system_instruction: str
    temperature: float
    top_p: float
    max_output_tokens: int
    metadata: Dict[str, Any]


BackendCallable = Callable[[BackendRequest], Optional[str]]


def render_user_message(request: PromptRequest) -> str:
    """Deterministic text rendering of the request fields."""
    return (
        f"User Idea: {request.idea}\n"
        f"Prompt Type: {request.type.value}\n"
        f"Tone: {request.tone.value}\n"
        f"Skill Level: {request.level.value}"
    )


class GenerationClient:
    """Single entry point to the remote text-generation capability."""

    def __init__(self, config: AppConfig, system_instruction: str = SYSTEM_INSTRUCTION) -> None:
        self.config = config
        self.system_instruction = system_instruction
        self._backends: Dict[str, BackendCallable] = {}
        self.warnings: list[str] = []
        self._auto_register_backends()

    def register_backend(self, name: str, backend: BackendCallable) -> None:
        """Register a generation backend."""
        self._backends[name.lower()] = backend

    def available_backends(self) -> list[str]:
        """Return the list of registered backends ordered by preference."""
        priority = {"gemini": 0, "gpt": 1, "claude": 2}
        return sorted(
            self._backends.keys(),
            key=lambda item: (priority.get(item, 99), item),
        )

    def default_backend(self) -> str:
        """Return the configured backend, else the preferred registered one."""
        if self.config.default_backend:
            return self.config.default_backend.lower()
        choices = self.available_backends()
        if choices:
            return choices[0]
        return "gemini"

    def build_backend_request(self, request: PromptRequest) -> BackendRequest:
        return BackendRequest(
            user_message=render_user_message(request),
            system_instruction=self.system_instruction,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            max_output_tokens=self.config.max_output_tokens,
            metadata=self.config.metadata,
        )

    async def generate(self, request: PromptRequest, backend: Optional[str] = None) -> str:
        """Return the optimized prompt text for a request.

        Raises MissingCredentialError before any network call when the
        selected backend has no API key, and ProviderError when the call
        itself fails. An empty reply yields FALLBACK_TEXT.
        """
        name = (backend or self.default_backend()).lower()
        handler = self._backends.get(name)
        if handler is None:
            if self.config.credential_for(name):
                detail = "; ".join(self.warnings) or f"backend '{name}' is not available"
                logger.error("Generation backend %s unusable: %s", name, detail)
                raise ProviderError(
                    "The generation service is not available. Check the installed dependencies."
                )
            raise MissingCredentialError("API key not found. Check your .env file.")

        payload = self.build_backend_request(request)
        try:
            text = await asyncio.to_thread(handler, payload)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Generation backend %s failed", name)
            raise ProviderError("Failed to communicate with the generation service.") from exc

        if not text or not str(text).strip():
            logger.warning("Generation backend %s returned an empty reply", name)
            return FALLBACK_TEXT
        return str(text).strip()

    # Internal helpers ---------------------------------------------------------
    def _auto_register_backends(self) -> None:
        """Register backends automatically when credentials and SDKs are available."""
        self._register_openai_compatible_backend(
            "gemini",
            api_key=self.config.gemini_key,
            base_url=self.config.metadata.get("gemini_base_url") or GEMINI_OPENAI_BASE_URL,
            model_name=self.config.metadata.get("gemini_model", "gemini-2.5-flash"),
        )
        self._register_openai_compatible_backend(
            "gpt",
            api_key=self.config.openai_key,
            base_url=self.config.metadata.get("openai_base_url"),
            model_name=self.config.metadata.get("openai_model", "gpt-4o-mini"),
        )
        self._register_claude_backend()

    def _register_openai_compatible_backend(
        self,
        name: str,
        *,
        api_key: Optional[str],
        base_url: Optional[str],
        model_name: str,
    ) -> None:
        if not api_key:
            return
        try:
            openai_module = importlib.import_module("openai")
        except ImportError as exc:
            self.warnings.append(f"Unable to import openai: {exc}")
            return

        client_kwargs = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url
        client = openai_module.OpenAI(**client_kwargs)

        def _openai_backend(request: BackendRequest) -> Optional[str]:
            completion = client.chat.completions.create(
                model=model_name,
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.user_message},
                ],
                temperature=request.temperature,
                top_p=request.top_p,
                max_tokens=request.max_output_tokens,
            )
            return _extract_openai_text(completion)

        self.register_backend(name, _openai_backend)

    def _register_claude_backend(self) -> None:
        if not self.config.anthropic_key:
            return
        try:
            anthropic_module = importlib.import_module("anthropic")
        except ImportError as exc:  # pragma: no cover - optional dependency
            self.warnings.append(f"Unable to import anthropic: {exc}")
            return

        client = anthropic_module.Anthropic(api_key=self.config.anthropic_key)
        model_name = self.config.metadata.get("claude_model", "claude-3-5-haiku-latest")

        def _claude_backend(request: BackendRequest) -> Optional[str]:
            message = client.messages.create(
                model=model_name,
                max_tokens=request.max_output_tokens,
                system=request.system_instruction,
                temperature=request.temperature,
                top_p=request.top_p,
                messages=[{"role": "user", "content": request.user_message}],
            )
            parts = [
                getattr(block, "text", "")
                for block in (message.content or [])
                if getattr(block, "type", "") == "text"
            ]
            return "\n".join(part for part in parts if part) or None

        self.register_backend("claude", _claude_backend)


def _extract_openai_text(completion: Any) -> Optional[str]:
    choices = getattr(completion, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str) and content.strip():
        return content
    return None
