"""Generation lifecycle orchestration."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from modules.optimization.generation_client import GenerationClient, GenerationError
from modules.optimization.request_builder import PromptRequest, build_request
from modules.optimization.result_analyzer import PromptMetrics, analyze
from modules.services.history_service import HistoryItem, HistoryStore

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class GenerationOutcome:
    """Transient state of the current generation attempt."""

    status: GenerationStatus
    text: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "GenerationOutcome":
        return cls(GenerationStatus.IDLE)

    @classmethod
    def loading(cls) -> "GenerationOutcome":
        return cls(GenerationStatus.LOADING)

    @classmethod
    def success(cls, text: str) -> "GenerationOutcome":
        return cls(GenerationStatus.SUCCESS, text=text)

    @classmethod
    def error(cls, message: str) -> "GenerationOutcome":
        return cls(GenerationStatus.ERROR, message=message)


def _now_ms() -> int:
    return int(time.time() * 1000)


class GenerationController:
    """Owns the idle/loading/success/error state machine.

    Overlapping runs are not cancelled. Every successful run records its own
    history item, but only the most recently started run may change the
    displayed outcome.
    """

    def __init__(
        self,
        client: GenerationClient,
        history: HistoryStore,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self.client = client
        self.history = history
        self._clock = clock
        self._id_factory = id_factory
        self._outcome = GenerationOutcome.idle()
        self._latest_run = 0

    @property
    def outcome(self) -> GenerationOutcome:
        return self._outcome

    @property
    def metrics(self) -> Optional[PromptMetrics]:
        if self._outcome.status is GenerationStatus.SUCCESS:
            return analyze(self._outcome.text)
        return None

    def reset(self) -> None:
        """Drop the displayed result, as when the user starts a new prompt."""
        self._outcome = GenerationOutcome.idle()

    async def submit(
        self,
        idea: str,
        type: Any,
        tone: Any,
        level: Any,
        backend: Optional[str] = None,
    ) -> GenerationOutcome:
        """Validate form values, then run a generation.

        ValidationError propagates before any state transition.
        """
        request = build_request(idea, type, tone, level)
        return await self.run_generation(request, backend=backend)

    async def run_generation(
        self, request: PromptRequest, backend: Optional[str] = None
    ) -> GenerationOutcome:
        self._latest_run += 1
        run_id = self._latest_run
        self._outcome = GenerationOutcome.loading()

        try:
            text = await self.client.generate(request, backend=backend)
        except asyncio.CancelledError:
            logger.warning("Generation run %d was cancelled", run_id)
            if run_id == self._latest_run:
                self._outcome = GenerationOutcome.error("Generation was cancelled.")
            raise
        except GenerationError as exc:
            logger.warning("Generation run %d failed: %s", run_id, exc)
            outcome = GenerationOutcome.error(str(exc))
        else:
            self.history.append(self._new_item(request, text))
            outcome = GenerationOutcome.success(text)

        if run_id == self._latest_run:
            self._outcome = outcome
        else:
            logger.info("Generation run %d settled after a newer run started", run_id)
        return outcome

    async def replay(self, item_id: str, backend: Optional[str] = None) -> GenerationOutcome:
        """Run a stored request again; the stored item is left untouched."""
        item = self.history.get(item_id)
        if item is None:
            raise KeyError(f"History item '{item_id}' not found")
        return await self.run_generation(item.request, backend=backend)

    def restore(self, item_id: str) -> GenerationOutcome:
        """Display a stored result without generating."""
        item = self.history.get(item_id)
        if item is None:
            raise KeyError(f"History item '{item_id}' not found")
        self._outcome = GenerationOutcome.success(item.result)
        return self._outcome

    # Internal helpers ---------------------------------------------------------
    def _new_item(self, request: PromptRequest, text: str) -> HistoryItem:
        timestamp = self._clock()
        newest = self.history.newest()
        if newest is not None:
            timestamp = max(timestamp, newest.timestamp)
        return HistoryItem(id=self._id_factory(), request=request, result=text, timestamp=timestamp)
