"""Capability protocol and execution data models.

A capability is one named, schema-validated action the agent can take against
the environment. The reasoning engine selects capabilities by name; the
``CapabilityRegistry`` validates the raw input against ``input_schema`` and
executes the implementation with a ``CapabilityContext``.

Capabilities should:

- return a failure ``Outcome`` (not raise) when their target is absent,
- keep side effects inside ``execute``,
- declare ``idempotent = False`` when repeating a call repeats the effect.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Protocol, Type

from pydantic import BaseModel, ConfigDict, Field

from minebot.environment.session import EnvironmentSession

if TYPE_CHECKING:
    from ..runtime.tracking import TargetReference
    from .registry import CapabilityRegistry


class CapabilityName(str, Enum):
    """Closed set of capability identifiers.

    The values are the tool names exposed to the reasoning engine.
    """

    chat = "chat"
    set_movement = "setMovement"
    stop_movement = "stopMovement"
    jump = "jump"
    attack = "attack"
    mount = "mount"
    dismount = "dismount"
    move_vehicle = "moveVehicle"
    get_position = "getPosition"
    get_rotation = "getRotation"
    look_at_player = "lookAtPlayer"
    stop_looking = "stopLooking"
    get_nearby_entities = "getNearbyEntities"
    get_players = "getPlayers"
    get_health = "getHealth"
    list_tools = "listTools"
    run_sequence = "runSequence"


# The capability every session must use at least once to reply to the operator
COMMUNICATION_CAPABILITY = CapabilityName.chat


class Outcome(BaseModel):
    """Structured result of one capability invocation."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="Whether the capability did what was asked")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Capability-specific structured data")
    message: str = Field(default="", description="Human-readable summary")

    @classmethod
    def ok(cls, message: str = "", **payload: Any) -> "Outcome":
        return cls(success=True, payload=payload, message=message)

    @classmethod
    def fail(cls, message: str, **payload: Any) -> "Outcome":
        return cls(success=False, payload=payload, message=message)


@dataclass(frozen=True)
class CapabilityContext:
    """Execution context passed to capability implementations.

    Attributes
    ----------
    env:
        The live environment session.
    target:
        The shared target reference read by the tracking loop.
    registry:
        The registry executing the capability, for capabilities that describe
        or call other capabilities.
    """

    env: EnvironmentSession
    target: "TargetReference"
    registry: "CapabilityRegistry"


class Capability(Protocol):
    """Protocol for capability implementations."""

    name: CapabilityName
    description: str
    input_schema: Type[BaseModel]
    idempotent: bool

    async def execute(self, ctx: CapabilityContext, *, args: BaseModel) -> Outcome: ...
