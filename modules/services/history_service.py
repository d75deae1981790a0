"""Generation history tracking."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from modules.optimization.request_builder import PromptRequest
from modules.services.storage_service import KeyValueStorage

logger = logging.getLogger(__name__)

HISTORY_KEY = "promptforge_history_v5_prod"
DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """A past request paired with its generated result."""

    id: str
    request: PromptRequest
    result: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "request": self.request.to_dict(),
            "result": self.result,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        item_id, result, timestamp = data["id"], data["result"], data["timestamp"]
        if not isinstance(item_id, str) or not isinstance(result, str):
            raise TypeError("id and result must be strings")
        # bool is an int subclass; floats such as Infinity are not timestamps.
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise TypeError(f"timestamp must be an integer, got {timestamp!r}")
        return cls(
            id=item_id,
            request=PromptRequest.from_dict(data["request"]),
            result=result,
            timestamp=timestamp,
        )


class HistoryStore:
    """Newest-first, size-bounded history persisted under a single key.

    Every mutation rewrites the whole sequence. Storage failures are logged
    and never raised; the in-memory list stays authoritative for the rest of
    the session.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = HISTORY_KEY,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.storage = storage
        self.key = key
        self.limit = limit
        self._items: List[HistoryItem] = self._read()

    @property
    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[HistoryItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def newest(self) -> Optional[HistoryItem]:
        return self._items[0] if self._items else None

    def load_all(self) -> List[HistoryItem]:
        """Return the sequence read from storage when the store was created.

        Storage is read only once per session; after that the in-memory list
        is authoritative, even if a later write failed.
        """
        return list(self._items)

    def append(self, item: HistoryItem) -> None:
        self._items = [item, *self._items][: self.limit]
        self._persist()

    def remove(self, item_id: str) -> None:
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            logger.debug("History item %s not found; nothing removed", item_id)
        self._items = remaining
        self._persist()

    def clear(self) -> None:
        self._items = []
        try:
            self.storage.remove(self.key)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to erase persisted history")

    # Internal helpers ---------------------------------------------------------
    def _read(self) -> List[HistoryItem]:
        try:
            raw = self.storage.get(self.key)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to read persisted history")
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            items = [HistoryItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError, AttributeError, OverflowError, RecursionError):
            logger.exception("Persisted history is corrupt; starting with an empty history")
            return []
        return items[: self.limit]

    def _persist(self) -> None:
        try:
            payload = json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)
            self.storage.set(self.key, payload)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to persist history")
