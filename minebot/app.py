"""Application wiring.

``BotApplication`` subscribes the agent to a connected environment session:

- ``chat``: operator commands start a control loop session in their own task,
  so concurrent commands run concurrently and independently,
- ``spawn`` (once): starts the target tracker,
- ``mount`` / ``dismount``: announce the vehicle in chat,
- ``kicked`` / ``error``: logged for the operator,
- ``end``: stops the tracker and releases ``wait_closed``.

Environment clients may deliver events from their own thread; handlers hop
onto the application's event loop before touching any state.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Set

from minebot.agent_core.abstraction.base import ReasoningEngine
from minebot.agent_core.capabilities import CapabilityRegistry
from minebot.agent_core.factory import build_control_loop, build_tracker
from minebot.agent_core.runtime.control_loop import AgentControlLoop
from minebot.agent_core.runtime.models import SessionReport
from minebot.agent_core.runtime.tracking import TargetReference, TargetTracker
from minebot.core.config import AgentLoopConfig
from minebot.core.logging_config import get_logger
from minebot.environment.session import EntityInfo, EnvironmentEvent, EnvironmentSession

logger = get_logger(__name__)


class BotApplication:
    """Connects the control loop and the tracker to one environment session."""

    def __init__(self, *, config: AgentLoopConfig, registry: CapabilityRegistry, engine: ReasoningEngine) -> None:
        self._config = config
        self._registry = registry
        self._engine = engine
        self._target = TargetReference()
        self._env: Optional[EnvironmentSession] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._control_loop: Optional[AgentControlLoop] = None
        self._tracker: Optional[TargetTracker] = None
        self._sessions: Set[asyncio.Task] = set()
        self._closing: Optional[asyncio.Task] = None
        self._closed = asyncio.Event()

    @property
    def target(self) -> TargetReference:
        return self._target

    @property
    def control_loop(self) -> AgentControlLoop:
        if self._control_loop is None:
            raise RuntimeError("Application not attached. Call attach() first.")
        return self._control_loop

    @property
    def tracker(self) -> TargetTracker:
        if self._tracker is None:
            raise RuntimeError("Application not attached. Call attach() first.")
        return self._tracker

    @property
    def pending_sessions(self) -> int:
        return len(self._sessions)

    def attach(self, env: EnvironmentSession) -> None:
        """Subscribe to the session's events. Must be called from the running event loop."""
        if self._env is not None:
            raise RuntimeError("Application is already attached to a session")

        self._env = env
        self._loop = asyncio.get_running_loop()
        self._control_loop = build_control_loop(
            config=self._config, registry=self._registry, engine=self._engine, env=env, target=self._target
        )
        self._tracker = build_tracker(config=self._config, env=env, target=self._target)

        env.on(EnvironmentEvent.chat, self._on_chat)
        env.once(EnvironmentEvent.spawn, self._on_spawn)
        env.on(EnvironmentEvent.mount, self._on_mount)
        env.on(EnvironmentEvent.dismount, self._on_dismount)
        env.on(EnvironmentEvent.kicked, self._on_kicked)
        env.on(EnvironmentEvent.error, self._on_error)
        env.on(EnvironmentEvent.end, self._on_end)
        logger.info(f"Attached to environment as {env.username}; operator={self._config.operator}")

    async def wait_closed(self) -> None:
        await self._closed.wait()

    async def drain(self) -> None:
        """Wait for every in-flight command session to finish."""
        await asyncio.sleep(0)
        while self._sessions:
            await asyncio.gather(*list(self._sessions), return_exceptions=True)

    async def shutdown(self) -> None:
        """Stop the tracker and cancel in-flight sessions."""
        if self._tracker is not None:
            await self._tracker.stop()
        for task in list(self._sessions):
            task.cancel()
        if self._sessions:
            await asyncio.gather(*list(self._sessions), return_exceptions=True)
        self._closed.set()

    # ------------------------------------------------------------------
    # event handlers
    # ------------------------------------------------------------------

    def _submit(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            fn(*args)
        else:
            self._loop.call_soon_threadsafe(fn, *args)

    def _on_chat(self, sender: str, text: str) -> None:
        if self.control_loop.parse_command(sender, text) is None:
            return
        self._submit(self._start_session, sender, text)

    def _start_session(self, sender: str, text: str) -> None:
        task = asyncio.get_running_loop().create_task(self._run_session(sender, text), name=f"command-{sender}")
        self._sessions.add(task)
        task.add_done_callback(self._sessions.discard)

    async def _run_session(self, sender: str, text: str) -> Optional[SessionReport]:
        try:
            report = await self.control_loop.handle_chat(sender, text)
        except Exception:
            # handle_chat converts every failure into a reply; this only guards the task itself
            logger.exception("Unhandled error in command session")
            return None
        logger.debug(f"Command session finished: {report.status.value}")
        return report

    def _on_spawn(self, *args: Any) -> None:
        logger.info("Environment session ready; starting target tracker")
        self._submit(self.tracker.start)

    def _on_mount(self, *args: Any) -> None:
        vehicle = self._env.current_vehicle()
        name = (vehicle.display_name or vehicle.name) if vehicle is not None else "vehicle"
        self._announce(f"Mounted {name}")

    def _on_dismount(self, vehicle: Optional[EntityInfo] = None, *args: Any) -> None:
        name = (vehicle.display_name or vehicle.name) if vehicle is not None else "vehicle"
        self._announce(f"Dismounted {name}")

    def _on_kicked(self, reason: Any = None, *args: Any) -> None:
        logger.warning(f"Kicked from environment: {reason}")

    def _on_error(self, error: Any = None, *args: Any) -> None:
        logger.error(f"Environment error: {error}")

    def _on_end(self, reason: Any = None, *args: Any) -> None:
        logger.info(f"Environment session ended: {reason}")
        self._submit(self._close)

    def _close(self) -> None:
        if self._closing is not None:
            return
        self._closing = self._loop.create_task(self.shutdown(), name="shutdown")
        self._closing.add_done_callback(self._on_closed)

    @staticmethod
    def _on_closed(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Shutdown failed: {task.exception()}", exc_info=task.exception())

    def _announce(self, message: str) -> None:
        try:
            self._env.send_chat(message)
        except Exception as e:
            logger.error(f"Could not announce {message!r}: {e}")
