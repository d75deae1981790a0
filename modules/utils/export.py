"""Export helpers for generated prompts."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def export_filename(now: Optional[float] = None) -> str:
    """Return the markdown filename for an export made at ``now`` (epoch seconds)."""
    moment = time.time() if now is None else now
    return f"optimized-prompt-{int(round(moment * 1000))}.md"


def export_markdown(text: str, output_dir: Path, now: Optional[float] = None) -> Path:
    """Write the result to a timestamped markdown file and return its path."""
    output_dir = Path(output_dir)
    path = output_dir / export_filename(now)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError:
        logger.exception("Failed to export prompt to %s", path)
        raise
    logger.info("Exported prompt to %s", path)
    return path
