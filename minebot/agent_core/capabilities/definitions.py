"""Input schemas for the built-in capabilities.

Field aliases are the parameter names the reasoning engine sees in the tool
JSON schema; Python code uses the snake_case attribute names.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from minebot.environment.session import ControlState


class _CapabilityInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class NoInput(_CapabilityInput):
    """Input schema for capabilities without parameters."""


class ChatInput(_CapabilityInput):
    message: str = Field(..., min_length=1, description="The message to send in the chat")


class SetMovementInput(_CapabilityInput):
    direction: ControlState = Field(..., description="The direction to move")
    enabled: bool = Field(..., description="Whether to enable or disable this movement")


class MountInput(_CapabilityInput):
    entity_type: str = Field(
        default="minecart",
        alias="entityType",
        description=(
            "The type of entity to mount (e.g., 'minecart', 'horse', 'pig'). "
            "If not specified, mounts the nearest minecart."
        ),
    )


class MoveVehicleInput(_CapabilityInput):
    sideways: float = Field(
        ..., ge=-1, le=1, description="Sideways movement: positive for left, negative for right (range: -1 to 1)"
    )
    forward: float = Field(
        ...,
        ge=-1,
        le=1,
        description="Forward/backward movement: positive for forward, negative for backward (range: -1 to 1)",
    )


class LookAtPlayerInput(_CapabilityInput):
    player_name: str = Field(..., min_length=1, alias="playerName", description="The name of the player to look at")


# Capabilities a sequence may not call. Replies to the operator go through a
# direct chat call so they show up in the session transcript.
RESERVED_IN_SEQUENCE = frozenset({"runSequence", "listTools", "chat"})


class SequenceStep(_CapabilityInput):
    capability: str = Field(..., description="Name of the capability to call")
    input: Dict[str, Any] = Field(default_factory=dict, description="Arguments for the capability")

    @field_validator("capability")
    @classmethod
    def _not_reserved(cls, value: str) -> str:
        if value in RESERVED_IN_SEQUENCE:
            raise ValueError(f"'{value}' cannot be used inside a sequence")
        return value


class RunSequenceInput(_CapabilityInput):
    steps: List[SequenceStep] = Field(
        ..., min_length=1, max_length=10, description="Capability calls to run in order; stops at the first failure"
    )

