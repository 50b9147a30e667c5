"""Environment session interface and value types."""

from .session import (
    ControlState,
    EntityInfo,
    EnvironmentEvent,
    EnvironmentSession,
    Orientation,
    PlayerInfo,
    Vec3,
    Vitals,
)

__all__ = [
    "ControlState",
    "EntityInfo",
    "EnvironmentEvent",
    "EnvironmentSession",
    "Orientation",
    "PlayerInfo",
    "Vec3",
    "Vitals",
]
