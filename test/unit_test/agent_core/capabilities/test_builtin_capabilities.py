from __future__ import annotations

import asyncio

import pytest

from minebot.agent_core.capabilities import CapabilityContext, CapabilityName, CapabilityRegistry
from minebot.agent_core.capabilities.builtin import JumpCapability, builtin_capabilities
from minebot.agent_core.capabilities.definitions import NoInput
from minebot.agent_core.runtime.tracking import TargetReference
from minebot.environment.session import ControlState, EntityInfo, PlayerInfo, Vec3


def _entity(entity_id: int, name: str, position: Vec3 = Vec3(1.0, 64.0, 0.0)) -> EntityInfo:
    return EntityInfo(id=entity_id, name=name, display_name=name.capitalize(), type="mob", position=position)


def test_every_builtin_is_described_and_unique() -> None:
    caps = builtin_capabilities()
    assert [c.name for c in caps] == list(CapabilityName)
    assert all(c.description for c in caps)


class TestChat:
    @pytest.mark.asyncio
    async def test_sends_message(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch("chat", {"message": "hello there"}, ctx)

        assert outcome.success is True
        assert env.chats == ["hello there"]

    @pytest.mark.asyncio
    async def test_empty_message_is_rejected(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch("chat", {"message": ""}, ctx)

        assert outcome.success is False
        assert env.chats == []


class TestMovement:
    @pytest.mark.asyncio
    async def test_set_movement(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch("setMovement", {"direction": "forward", "enabled": True}, ctx)

        assert outcome.success is True
        assert env.control_calls == [(ControlState.forward, True)]

    @pytest.mark.asyncio
    async def test_set_movement_rejects_unknown_direction(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env
    ) -> None:
        outcome = await registry.dispatch("setMovement", {"direction": "up", "enabled": True}, ctx)

        assert outcome.success is False
        assert env.control_calls == []

    @pytest.mark.asyncio
    async def test_stop_movement(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch("stopMovement", {}, ctx)

        assert outcome.success is True
        assert env.cleared == 1

    @pytest.mark.asyncio
    async def test_jump_presses_and_releases(self, ctx: CapabilityContext, env) -> None:
        outcome = await JumpCapability(press_seconds=0.01).execute(ctx, args=NoInput())

        assert outcome.success is True
        assert env.control_calls == [(ControlState.jump, True)]
        await asyncio.sleep(0.05)
        assert env.control_calls == [(ControlState.jump, True), (ControlState.jump, False)]


class TestCombatAndVehicles:
    @pytest.mark.asyncio
    async def test_attack_without_entities_fails(self, registry: CapabilityRegistry, ctx: CapabilityContext) -> None:
        outcome = await registry.dispatch("attack", {}, ctx)

        assert outcome.success is False
        assert outcome.message == "No nearby entities to attack"

    @pytest.mark.asyncio
    async def test_attack_nearest(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.entities = [_entity(7, "zombie")]

        outcome = await registry.dispatch("attack", {}, ctx)

        assert outcome.success is True
        assert [e.id for e in env.attacked] == [7]

    @pytest.mark.asyncio
    async def test_mount_defaults_to_minecart(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.entities = [_entity(1, "pig"), _entity(2, "minecart")]

        outcome = await registry.dispatch("mount", {}, ctx)

        assert outcome.success is True
        assert env.vehicle is not None and env.vehicle.id == 2

    @pytest.mark.asyncio
    async def test_mount_missing_kind_fails(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.entities = [_entity(1, "pig")]

        outcome = await registry.dispatch("mount", {"entityType": "horse"}, ctx)

        assert outcome.success is False
        assert outcome.message == "No nearby horse found"
        assert env.vehicle is None

    @pytest.mark.asyncio
    async def test_dismount_without_vehicle_fails(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch("dismount", {}, ctx)

        assert outcome.success is False
        assert env.dismounted == 0

    @pytest.mark.asyncio
    async def test_move_vehicle(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.vehicle = _entity(2, "minecart")

        outcome = await registry.dispatch("moveVehicle", {"sideways": 0, "forward": 1}, ctx)

        assert outcome.success is True
        assert env.vehicle_moves == [(0.0, 1.0)]

    @pytest.mark.asyncio
    async def test_move_vehicle_when_not_riding_fails(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env
    ) -> None:
        outcome = await registry.dispatch("moveVehicle", {"sideways": 0, "forward": 1}, ctx)

        assert outcome.success is False
        assert env.vehicle_moves == []


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_position(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.position = Vec3(1.5, 70.0, -3.0)

        outcome = await registry.dispatch("getPosition", {}, ctx)

        assert outcome.payload["x"] == 1.5
        assert outcome.payload["formatted"] == "(1.5, 70.0, -3.0)"

    @pytest.mark.asyncio
    async def test_get_rotation(self, registry: CapabilityRegistry, ctx: CapabilityContext) -> None:
        outcome = await registry.dispatch("getRotation", {}, ctx)
        assert outcome.payload == {"yaw": 0.0, "pitch": 0.0}

    @pytest.mark.asyncio
    async def test_get_health(self, registry: CapabilityRegistry, ctx: CapabilityContext) -> None:
        outcome = await registry.dispatch("getHealth", {}, ctx)
        assert outcome.payload == {"health": 20.0, "food": 18.0, "saturation": 5.0}

    @pytest.mark.asyncio
    async def test_get_nearby_entities_is_capped(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        env.entities = [_entity(i, "cow", Vec3(float(i), 64.0, 0.0)) for i in range(15)]

        outcome = await registry.dispatch("getNearbyEntities", {}, ctx)

        entities = outcome.payload["entities"]
        assert len(entities) == 10
        assert entities[3] == {"name": "cow", "displayName": "Cow", "type": "mob", "distance": 3.0}

    @pytest.mark.asyncio
    async def test_get_nearby_entities_excludes_self(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, make_player
    ) -> None:
        me = make_player("Claude", 12)
        env.players = {"Claude": me}
        env.entities = [me.entity, _entity(7, "zombie")]

        outcome = await registry.dispatch("getNearbyEntities", {}, ctx)

        assert [e["name"] for e in outcome.payload["entities"]] == ["zombie"]

    @pytest.mark.asyncio
    async def test_get_players(self, registry: CapabilityRegistry, ctx: CapabilityContext, env, make_player) -> None:
        env.players = {"eepyalex": make_player("eepyalex", 11), "Claude": make_player("Claude", 12)}

        outcome = await registry.dispatch("getPlayers", {}, ctx)

        assert sorted(outcome.payload["players"]) == ["Claude", "eepyalex"]

    @pytest.mark.asyncio
    async def test_list_tools_lists_every_registered_capability(
        self, registry: CapabilityRegistry, ctx: CapabilityContext
    ) -> None:
        outcome = await registry.dispatch("listTools", {}, ctx)

        tools = outcome.payload["tools"]
        assert len(tools) == len(CapabilityName)
        assert [t.split(" - ")[0] for t in tools] == registry.names()


class TestLooking:
    @pytest.mark.asyncio
    async def test_look_at_player_sets_target(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, target: TargetReference, make_player
    ) -> None:
        env.players = {"eepyalex": make_player("eepyalex", 11)}

        outcome = await registry.dispatch("lookAtPlayer", {"playerName": "eepyalex"}, ctx)

        assert outcome.success is True
        tracked = target.get()
        assert tracked is not None
        assert (tracked.player_name, tracked.entity_id) == ("eepyalex", 11)

    @pytest.mark.asyncio
    async def test_look_at_player_is_idempotent(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, target: TargetReference, make_player
    ) -> None:
        env.players = {"eepyalex": make_player("eepyalex", 11)}

        await registry.dispatch("lookAtPlayer", {"playerName": "eepyalex"}, ctx)
        first = target.get()
        await registry.dispatch("lookAtPlayer", {"playerName": "eepyalex"}, ctx)

        assert target.get() == first

    @pytest.mark.asyncio
    async def test_unknown_player_leaves_target_unchanged(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, target: TargetReference, make_player
    ) -> None:
        env.players = {"eepyalex": make_player("eepyalex", 11)}
        await registry.dispatch("lookAtPlayer", {"playerName": "eepyalex"}, ctx)

        outcome = await registry.dispatch("lookAtPlayer", {"playerName": "nobody"}, ctx)

        assert outcome.success is False
        assert outcome.message == "Player nobody not found"
        assert target.get().player_name == "eepyalex"

    @pytest.mark.asyncio
    async def test_player_out_of_range_is_not_found(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, target: TargetReference
    ) -> None:
        env.players = {"far": PlayerInfo(username="far")}

        outcome = await registry.dispatch("lookAtPlayer", {"playerName": "far"}, ctx)

        assert outcome.success is False
        assert target.is_tracking is False

    @pytest.mark.asyncio
    async def test_stop_looking_clears_and_always_succeeds(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, target: TargetReference, make_player
    ) -> None:
        env.players = {"eepyalex": make_player("eepyalex", 11)}
        await registry.dispatch("lookAtPlayer", {"playerName": "eepyalex"}, ctx)

        first = await registry.dispatch("stopLooking", {}, ctx)
        second = await registry.dispatch("stopLooking", {}, ctx)

        assert first.success is True and second.success is True
        assert target.get() is None


class TestRunSequence:
    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch(
            "runSequence",
            {
                "steps": [
                    {"capability": "setMovement", "input": {"direction": "forward", "enabled": True}},
                    {"capability": "setMovement", "input": {"direction": "sprint", "enabled": True}},
                    {"capability": "getPosition"},
                ]
            },
            ctx,
        )

        assert outcome.success is True
        assert [s["capability"] for s in outcome.payload["steps"]] == ["setMovement", "setMovement", "getPosition"]
        assert env.control_calls == [(ControlState.forward, True), (ControlState.sprint, True)]

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, registry: CapabilityRegistry, ctx: CapabilityContext, env) -> None:
        outcome = await registry.dispatch(
            "runSequence",
            {
                "steps": [
                    {"capability": "attack"},
                    {"capability": "setMovement", "input": {"direction": "forward", "enabled": True}},
                ]
            },
            ctx,
        )

        assert outcome.success is False
        assert outcome.message.startswith("Step 1 (attack) failed")
        assert len(outcome.payload["steps"]) == 1
        assert env.control_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reserved", ["chat", "listTools", "runSequence"])
    async def test_reserved_capabilities_are_rejected(
        self, registry: CapabilityRegistry, ctx: CapabilityContext, env, reserved: str
    ) -> None:
        outcome = await registry.dispatch("runSequence", {"steps": [{"capability": reserved}]}, ctx)

        assert outcome.success is False
        assert env.chats == []

    @pytest.mark.asyncio
    async def test_unknown_step_fails(self, registry: CapabilityRegistry, ctx: CapabilityContext) -> None:
        outcome = await registry.dispatch("runSequence", {"steps": [{"capability": "teleport"}]}, ctx)

        assert outcome.success is False
        assert "Unknown capability" in outcome.message
