"""One-off script for debugging a real prompt generation run."""

import asyncio
from pathlib import Path

from config.settings import load_config
from modules.optimization.generation_client import GenerationClient
from modules.optimization.result_analyzer import analyze
from modules.services.generation_controller import GenerationController
from modules.services.history_service import HistoryStore
from modules.services.storage_service import JsonFileStorage


async def main() -> None:
    # 1. Real configuration, history kept apart from the app's own data dir
    config = load_config()
    client = GenerationClient(config)
    print("Backends:", client.available_backends() or "none", client.warnings)

    history = HistoryStore(JsonFileStorage(Path("debug_history")))
    controller = GenerationController(client, history)

    # 2. Submit a form exactly as the UI would
    outcome = await controller.submit(
        "A chatbot that helps new employees find HR policies",
        "Chatbot",
        "Professional",
        "Beginner",
    )

    print("Status:", outcome.status.value)
    if outcome.text:
        print(outcome.text)
        print("Metrics:", analyze(outcome.text))
    else:
        print("Message:", outcome.message)
    print("History entries:", len(history))


if __name__ == "__main__":
    asyncio.run(main())
