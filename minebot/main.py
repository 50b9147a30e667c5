"""Process entry point.

Builds the capability registry and the reasoning engine from settings,
connects to the environment through the configured session factory and runs
until the session ends.
"""

from __future__ import annotations

import asyncio
import sys

from minebot.agent_core.abstraction.adapters.pydantic_ai import PydanticAIReasoningEngine
from minebot.agent_core.abstraction.model_provider import create_model, create_model_settings
from minebot.agent_core.errors import MinebotError
from minebot.agent_core.factory import build_default_registry
from minebot.app import BotApplication
from minebot.core.config import Settings, settings
from minebot.core.logging_config import get_logger, setup_logging
from minebot.environment.factory import connect

logger = get_logger(__name__)


async def run(config: Settings) -> None:
    registry = build_default_registry()
    model_config = config.reasoning_model
    engine = PydanticAIReasoningEngine(create_model(model_config), model_settings=create_model_settings(model_config))

    env = await connect(config.environment)
    app = BotApplication(config=config.agent_loop, registry=registry, engine=engine)
    app.attach(env)
    try:
        await app.wait_closed()
    finally:
        await app.shutdown()


def main() -> int:
    setup_logging()
    try:
        asyncio.run(run(settings))
    except MinebotError as e:
        logger.error(f"minebot failed to start: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
