"""Target reference and the target-tracking loop.

The tracker is a background loop independent of the agent control loop. The
only state the two share is the ``TargetReference``: the ``lookAtPlayer`` and
``stopLooking`` capabilities write it, the tracker reads it on every tick.

States:

- Idle: the reference is empty; ticks are no-ops.
- Tracking: the reference holds a player's entity id; each tick re-resolves
  the entity and aims at the top of it.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Optional

from minebot.core.logging_config import get_logger
from minebot.environment.session import EntityInfo, EnvironmentSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrackedTarget:
    """Non-owning handle to a tracked player entity."""

    player_name: str
    entity_id: int


class TargetReference:
    """Holds at most one tracked target.

    Setting a target replaces any previous one, clearing empties it. Access is
    guarded by a lock so environment callbacks on other threads cannot observe
    a half-applied update.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._target: Optional[TrackedTarget] = None

    def set(self, player_name: str, entity: EntityInfo) -> TrackedTarget:
        target = TrackedTarget(player_name=player_name, entity_id=entity.id)
        with self._lock:
            self._target = target
        return target

    def clear(self) -> None:
        with self._lock:
            self._target = None

    def get(self) -> Optional[TrackedTarget]:
        with self._lock:
            return self._target

    @property
    def is_tracking(self) -> bool:
        return self.get() is not None


class TargetTracker:
    """Aims the bot at the current target at a fixed interval."""

    def __init__(self, env: EnvironmentSession, target: TargetReference, *, interval: float = 0.05) -> None:
        self._env = env
        self._target = target
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop. Calling it again is a no-op."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="target-tracker")
        logger.debug(f"Target tracker started (interval={self._interval}s)")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Target tracker stopped")

    def tick(self) -> bool:
        """Run one tracking step.

        Returns:
            True if an aim mutation was issued.
        """
        target = self._target.get()
        if target is None:
            return False

        try:
            entity = self._env.query_entity(target.entity_id)
            if entity is None:
                logger.debug(f"Tracked entity for {target.player_name} is gone; skipping tick")
                return False
            self._env.look_at(entity.position.offset(0, entity.height, 0))
        except Exception as e:
            logger.debug(f"Environment rejected aim at {target.player_name}: {e}")
            return False
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.tick()
