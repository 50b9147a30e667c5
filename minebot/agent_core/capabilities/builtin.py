"""Built-in capabilities.

Each capability wraps one or two environment session calls. Missing targets
(no nearby entity, unknown player) are reported as failure outcomes so the
reasoning engine can react to them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Type

from pydantic import BaseModel

from minebot.environment.session import ControlState

from .base import Capability, CapabilityContext, CapabilityName, Outcome
from .definitions import (
    ChatInput,
    LookAtPlayerInput,
    MountInput,
    MoveVehicleInput,
    NoInput,
    RunSequenceInput,
    SetMovementInput,
)

# Seconds the jump control stays pressed
JUMP_PRESS_SECONDS = 0.1

# Maximum number of entities reported by getNearbyEntities
NEARBY_ENTITY_LIMIT = 10


@dataclass(frozen=True)
class ChatCapability(Capability):
    """The communication capability: sends one chat message."""

    name: CapabilityName = CapabilityName.chat
    description: str = "Send a chat message in the Minecraft server"
    input_schema: Type[BaseModel] = ChatInput
    idempotent: bool = False

    async def execute(self, ctx: CapabilityContext, *, args: ChatInput) -> Outcome:
        ctx.env.send_chat(args.message)
        return Outcome.ok("Message sent", sent=args.message)


@dataclass(frozen=True)
class SetMovementCapability(Capability):
    name: CapabilityName = CapabilityName.set_movement
    description: str = "Set a movement control state. Use this to move the bot in a direction."
    input_schema: Type[BaseModel] = SetMovementInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: SetMovementInput) -> Outcome:
        ctx.env.set_control_state(args.direction, args.enabled)
        state = "enabled" if args.enabled else "disabled"
        return Outcome.ok(f"{args.direction.value} {state}", direction=args.direction.value, enabled=args.enabled)


@dataclass(frozen=True)
class StopMovementCapability(Capability):
    name: CapabilityName = CapabilityName.stop_movement
    description: str = "Stop all movement. Clears all control states."
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        ctx.env.clear_control_states()
        return Outcome.ok("All movement stopped")


@dataclass(frozen=True)
class JumpCapability(Capability):
    """Press jump and release it shortly after without blocking the caller."""

    name: CapabilityName = CapabilityName.jump
    description: str = "Make the bot jump once"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = False
    press_seconds: float = JUMP_PRESS_SECONDS

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        ctx.env.set_control_state(ControlState.jump, True)
        asyncio.get_running_loop().call_later(self.press_seconds, ctx.env.set_control_state, ControlState.jump, False)
        return Outcome.ok("Jumped!")


@dataclass(frozen=True)
class AttackCapability(Capability):
    """Attack the nearest entity. Not idempotent: every call attacks again."""

    name: CapabilityName = CapabilityName.attack
    description: str = "Attack the nearest entity"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = False

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        entity = ctx.env.attack_nearest()
        if entity is None:
            return Outcome.fail("No nearby entities to attack")
        return Outcome.ok(f"Attacked {entity.name or 'entity'}", entity=entity.name)


@dataclass(frozen=True)
class MountCapability(Capability):
    name: CapabilityName = CapabilityName.mount
    description: str = "Mount the nearest minecart or rideable entity"
    input_schema: Type[BaseModel] = MountInput
    idempotent: bool = False

    async def execute(self, ctx: CapabilityContext, *, args: MountInput) -> Outcome:
        kind = args.entity_type
        entity = ctx.env.mount_nearest(lambda e: e.matches(kind))
        if entity is None:
            return Outcome.fail(f"No nearby {kind} found")
        return Outcome.ok(f"Mounting {entity.display_name or entity.name}", entity=entity.display_name or entity.name)


@dataclass(frozen=True)
class DismountCapability(Capability):
    name: CapabilityName = CapabilityName.dismount
    description: str = "Dismount from the current vehicle"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        if ctx.env.current_vehicle() is None:
            return Outcome.fail("Not riding anything")
        ctx.env.dismount()
        return Outcome.ok("Dismounted")


@dataclass(frozen=True)
class MoveVehicleCapability(Capability):
    name: CapabilityName = CapabilityName.move_vehicle
    description: str = "Move the vehicle the bot is currently riding"
    input_schema: Type[BaseModel] = MoveVehicleInput
    idempotent: bool = False

    async def execute(self, ctx: CapabilityContext, *, args: MoveVehicleInput) -> Outcome:
        if ctx.env.current_vehicle() is None:
            return Outcome.fail("Not riding a vehicle")
        ctx.env.move_vehicle(args.sideways, args.forward)
        return Outcome.ok("Vehicle moving", sideways=args.sideways, forward=args.forward)


@dataclass(frozen=True)
class GetPositionCapability(Capability):
    name: CapabilityName = CapabilityName.get_position
    description: str = "Get the bot's current position in the world"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        pos = ctx.env.query_position()
        return Outcome.ok(f"At {pos}", x=pos.x, y=pos.y, z=pos.z, formatted=str(pos))


@dataclass(frozen=True)
class GetRotationCapability(Capability):
    name: CapabilityName = CapabilityName.get_rotation
    description: str = "Get the bot's current yaw and pitch (where it's looking)"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        orientation = ctx.env.query_orientation()
        return Outcome.ok("Current rotation", yaw=orientation.yaw, pitch=orientation.pitch)


@dataclass(frozen=True)
class LookAtPlayerCapability(Capability):
    """Start tracking a player; leaves the current target alone if the player is absent."""

    name: CapabilityName = CapabilityName.look_at_player
    description: str = "Start looking at a specific player"
    input_schema: Type[BaseModel] = LookAtPlayerInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: LookAtPlayerInput) -> Outcome:
        player = ctx.env.query_players().get(args.player_name)
        if player is None or player.entity is None:
            return Outcome.fail(f"Player {args.player_name} not found")
        ctx.target.set(args.player_name, player.entity)
        return Outcome.ok(f"Now looking at {args.player_name}", player=args.player_name)


@dataclass(frozen=True)
class StopLookingCapability(Capability):
    name: CapabilityName = CapabilityName.stop_looking
    description: str = "Stop tracking/looking at the current target"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        ctx.target.clear()
        return Outcome.ok("Stopped looking at target")


@dataclass(frozen=True)
class GetNearbyEntitiesCapability(Capability):
    name: CapabilityName = CapabilityName.get_nearby_entities
    description: str = "Get a list of nearby entities"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True
    limit: int = NEARBY_ENTITY_LIMIT

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        origin = ctx.env.query_position()
        me = ctx.env.query_players().get(ctx.env.username)
        own_id = me.entity.id if me is not None and me.entity is not None else None
        others = [e for e in ctx.env.query_nearby_entities() if e.id != own_id]
        entities = [
            {
                "name": e.name,
                "displayName": e.display_name,
                "type": e.type,
                "distance": e.position.distance_to(origin),
            }
            for e in others[: self.limit]
        ]
        return Outcome.ok(f"{len(entities)} entities nearby", entities=entities)


@dataclass(frozen=True)
class GetPlayersCapability(Capability):
    name: CapabilityName = CapabilityName.get_players
    description: str = "Get a list of online players"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        players = list(ctx.env.query_players().keys())
        return Outcome.ok(f"{len(players)} players online", players=players)


@dataclass(frozen=True)
class GetHealthCapability(Capability):
    name: CapabilityName = CapabilityName.get_health
    description: str = "Get the bot's current health and food level"
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        vitals = ctx.env.query_vitals()
        return Outcome.ok(
            f"Health {vitals.health}, food {vitals.food}",
            health=vitals.health,
            food=vitals.food,
            saturation=vitals.saturation,
        )


@dataclass(frozen=True)
class ListToolsCapability(Capability):
    """Self-description generated from the registry, so it never drifts from what is registered."""

    name: CapabilityName = CapabilityName.list_tools
    description: str = (
        "List all available tools and their descriptions. "
        "Use this when the user asks what you can do or what tools you have."
    )
    input_schema: Type[BaseModel] = NoInput
    idempotent: bool = True

    async def execute(self, ctx: CapabilityContext, *, args: NoInput) -> Outcome:
        tools = [f"{d.name} - {d.description}" for d in ctx.registry.describe()]
        return Outcome.ok(f"{len(tools)} tools available", tools=tools)


@dataclass(frozen=True)
class RunSequenceCapability(Capability):
    """
    Run several capabilities in order through the registry.

    This is the scripting surface for operations not covered by a single
    capability. It only composes registered capabilities; no code is
    evaluated. Execution stops at the first failed step.
    """

    name: CapabilityName = CapabilityName.run_sequence
    description: str = (
        "Run a short sequence of the other tools in order, for multi-step operations. "
        "Each step names a tool and its input. Stops at the first failing step. "
        "Cannot contain chat, listTools or runSequence."
    )
    input_schema: Type[BaseModel] = RunSequenceInput
    idempotent: bool = False

    async def execute(self, ctx: CapabilityContext, *, args: RunSequenceInput) -> Outcome:
        results: List[Dict[str, Any]] = []
        for index, step in enumerate(args.steps):
            outcome = await ctx.registry.dispatch(step.capability, step.input, ctx)
            results.append({"capability": step.capability, "outcome": outcome.model_dump(mode="json")})
            if not outcome.success:
                return Outcome.fail(
                    f"Step {index + 1} ({step.capability}) failed: {outcome.message}",
                    steps=results,
                )
        return Outcome.ok(f"Ran {len(results)} steps", steps=results)


def builtin_capabilities() -> List[Capability]:
    """All built-in capabilities in the order they are presented to the engine."""
    return [
        ChatCapability(),
        SetMovementCapability(),
        StopMovementCapability(),
        JumpCapability(),
        AttackCapability(),
        MountCapability(),
        DismountCapability(),
        MoveVehicleCapability(),
        GetPositionCapability(),
        GetRotationCapability(),
        LookAtPlayerCapability(),
        StopLookingCapability(),
        GetNearbyEntitiesCapability(),
        GetPlayersCapability(),
        GetHealthCapability(),
        ListToolsCapability(),
        RunSequenceCapability(),
    ]
