"""Application entry point for the PromptForge project."""

from __future__ import annotations

from typing import Optional

from config.settings import load_config
from modules.ui.layout import build_app
from modules.utils.logging import setup_logging


def main(config_path: Optional[str] = None) -> None:
    """Load configuration and launch the Gradio interface."""
    config = load_config(config_path)
    logger = setup_logging(config)
    app = build_app(config)
    logger.info("Starting PromptForge (history in %s)", config.data_dir)
    app.queue()
    app.launch(share=False, inbrowser=False)


if __name__ == "__main__":
    main()
