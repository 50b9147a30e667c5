"""Environment session interface.

The environment session is the long-lived connection to the virtual world.
It is an external collaborator: minebot never opens or manages the connection
itself, it only calls the operations and subscribes to the events declared
here. A concrete client (for example a bridge to a Mineflayer bot) is loaded
through ``minebot.environment.factory``.

Value objects returned by the query operations are immutable snapshots; any
entity may leave the world at any time, so callers keep entity ids rather than
snapshots and re-resolve them with ``query_entity`` before use.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable


class EnvironmentEvent(str, Enum):
    """Events emitted by an environment session."""

    chat = "chat"  # (sender: str, text: str)
    spawn = "spawn"  # () ready to operate, emitted once per connection
    mount = "mount"  # ()
    dismount = "dismount"  # (vehicle: EntityInfo)
    kicked = "kicked"  # (reason: str)
    error = "error"  # (error: BaseException)
    end = "end"  # (reason: str)


class ControlState(str, Enum):
    """Movement control states accepted by ``set_control_state``."""

    forward = "forward"
    back = "back"
    left = "left"
    right = "right"
    sprint = "sprint"
    jump = "jump"


@dataclass(frozen=True)
class Vec3:
    """A point in world coordinates."""

    x: float
    y: float
    z: float

    def offset(self, dx: float, dy: float, dz: float) -> "Vec3":
        return Vec3(self.x + dx, self.y + dy, self.z + dz)

    def distance_to(self, other: "Vec3") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass(frozen=True)
class Orientation:
    """Yaw and pitch in radians."""

    yaw: float
    pitch: float


@dataclass(frozen=True)
class Vitals:
    health: float
    food: float
    saturation: float


@dataclass(frozen=True)
class EntityInfo:
    """Snapshot of an entity in the world."""

    id: int
    name: Optional[str]
    display_name: Optional[str]
    type: str
    position: Vec3
    height: float = 0.0

    def matches(self, kind: str) -> bool:
        return self.name == kind or self.display_name == kind


@dataclass(frozen=True)
class PlayerInfo:
    """An online player; ``entity`` is None when the player is out of range."""

    username: str
    entity: Optional[EntityInfo] = None


EventHandler = Callable[..., Any]
EntityPredicate = Callable[[EntityInfo], bool]


@runtime_checkable
class EnvironmentSession(Protocol):
    """Operations and events the agent consumes from a live environment connection."""

    @property
    def username(self) -> str: ...

    # events
    def on(self, event: EnvironmentEvent, handler: EventHandler) -> None: ...

    def once(self, event: EnvironmentEvent, handler: EventHandler) -> None: ...

    # mutators
    def send_chat(self, text: str) -> None: ...

    def set_control_state(self, control: ControlState, enabled: bool) -> None: ...

    def clear_control_states(self) -> None: ...

    def look_at(self, point: Vec3) -> None: ...

    def mount_nearest(self, predicate: EntityPredicate) -> Optional[EntityInfo]: ...

    def dismount(self) -> None: ...

    def move_vehicle(self, sideways: float, forward: float) -> None: ...

    def attack_nearest(self) -> Optional[EntityInfo]: ...

    # queries
    def query_position(self) -> Vec3: ...

    def query_orientation(self) -> Orientation: ...

    def query_nearby_entities(self) -> List[EntityInfo]:
        """Loaded entities ordered by distance. May include the bot's own entity."""
        ...

    def query_players(self) -> Dict[str, PlayerInfo]: ...

    def query_vitals(self) -> Vitals: ...

    def query_entity(self, entity_id: int) -> Optional[EntityInfo]: ...

    def current_vehicle(self) -> Optional[EntityInfo]: ...
