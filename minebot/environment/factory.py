"""Loading and calling the configured environment session factory.

The concrete environment client lives outside minebot. Deployments point
``MINEBOT_SESSION_FACTORY`` at a ``module:callable`` that accepts the
connection parameters and returns a connected ``EnvironmentSession`` (or an
awaitable resolving to one).
"""

from __future__ import annotations

import importlib
import inspect
from typing import Any, Callable

from minebot.agent_core.errors import ConfigurationError
from minebot.core.config import EnvironmentConfig
from minebot.core.logging_config import get_logger

from .session import EnvironmentSession

logger = get_logger(__name__)

SessionFactory = Callable[..., Any]


def load_session_factory(path: str) -> SessionFactory:
    """Resolve a ``module:callable`` path to the session factory.

    Raises:
        ConfigurationError: If the path is malformed, the module cannot be
            imported, or the attribute is missing or not callable.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Session factory must look like 'module:callable', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import session factory module {module_name!r}: {e}") from e

    factory = module
    for part in attr.split("."):
        factory = getattr(factory, part, None)
        if factory is None:
            raise ConfigurationError(f"Session factory {path!r} not found")
    if not callable(factory):
        raise ConfigurationError(f"Session factory {path!r} is not callable")
    return factory


async def connect(config: EnvironmentConfig) -> EnvironmentSession:
    """Open an environment session using the configured factory."""
    if not config.session_factory:
        raise ConfigurationError("MINEBOT_SESSION_FACTORY is not set")

    factory = load_session_factory(config.session_factory)
    logger.info(f"Connecting to {config.host}:{config.port} as {config.username} (auth={config.auth})")
    session = factory(host=config.host, port=config.port, username=config.username, auth=config.auth)
    if inspect.isawaitable(session):
        session = await session
    if not isinstance(session, EnvironmentSession):
        raise ConfigurationError(f"Session factory {config.session_factory!r} returned {type(session).__name__}, not an EnvironmentSession")
    return session
