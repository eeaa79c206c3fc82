"""
Headless host
Loads saved apps and keeps their timers ticking until shutdown.
"""

import asyncio
import signal

from langchain_core.language_models import BaseLanguageModel

from neural_os.apps import AppManager
from neural_os.core import Settings, configure_logging, create_container, get_logger, get_settings
from neural_os.engine import TickDriver

logger = get_logger(__name__)


async def serve_async(
    settings: Settings | None = None,
    llm: BaseLanguageModel | None = None,
    stop: asyncio.Event | None = None,
) -> AppManager:
    """
    Run the tick loop over the configured store until ``stop`` is set.

    SIGINT/SIGTERM set ``stop`` when running on the main thread.

    Returns:
        The app manager, for inspection after shutdown
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    container = create_container(settings, llm)
    manager = container.get(AppManager)
    driver = container.get(TickDriver)
    stop = stop or asyncio.Event()

    loop = asyncio.get_running_loop()
    handled = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Not the main thread, or a platform without signal support
            break
        handled.append(sig)

    logger.info("starting", store=settings.store_path, apps=len(manager.apps))
    try:
        async with driver:
            await stop.wait()
    finally:
        for sig in handled:
            loop.remove_signal_handler(sig)
    logger.info("stopped", ticks=driver.ticks)
    return manager


def serve() -> None:
    """Entry point - run the host until interrupted."""
    asyncio.run(serve_async())


if __name__ == "__main__":
    serve()
