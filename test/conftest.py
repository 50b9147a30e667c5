from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import httpx
import pytest
from pydantic_ai import models

from minebot.agent_core.capabilities import CapabilityContext, CapabilityRegistry
from minebot.agent_core.factory import build_default_registry
from minebot.agent_core.runtime.tracking import TargetReference
from minebot.environment.session import (
    ControlState,
    EntityInfo,
    EnvironmentEvent,
    Orientation,
    PlayerInfo,
    Vec3,
    Vitals,
)


@dataclass
class FakeEnvironmentSession:
    """In-memory environment session that records every mutation."""

    username: str = "Claude"
    position: Vec3 = field(default_factory=lambda: Vec3(0.0, 64.0, 0.0))
    orientation: Orientation = field(default_factory=lambda: Orientation(yaw=0.0, pitch=0.0))
    vitals: Vitals = field(default_factory=lambda: Vitals(health=20.0, food=18.0, saturation=5.0))
    entities: List[EntityInfo] = field(default_factory=list)
    players: Dict[str, PlayerInfo] = field(default_factory=dict)
    vehicle: Optional[EntityInfo] = None

    chats: List[str] = field(default_factory=list)
    control_calls: List[Tuple[ControlState, bool]] = field(default_factory=list)
    cleared: int = 0
    looks: List[Vec3] = field(default_factory=list)
    vehicle_moves: List[Tuple[float, float]] = field(default_factory=list)
    attacked: List[EntityInfo] = field(default_factory=list)
    dismounted: int = 0

    handlers: Dict[EnvironmentEvent, List[Callable[..., Any]]] = field(default_factory=lambda: defaultdict(list))
    once_handlers: Dict[EnvironmentEvent, List[Callable[..., Any]]] = field(
        default_factory=lambda: defaultdict(list)
    )

    # events
    def on(self, event: EnvironmentEvent, handler: Callable[..., Any]) -> None:
        self.handlers[event].append(handler)

    def once(self, event: EnvironmentEvent, handler: Callable[..., Any]) -> None:
        self.once_handlers[event].append(handler)

    def emit(self, event: EnvironmentEvent, *args: Any) -> None:
        pending, self.once_handlers[event] = self.once_handlers[event], []
        for handler in [*self.handlers[event], *pending]:
            handler(*args)

    # mutators
    def send_chat(self, text: str) -> None:
        self.chats.append(text)

    def set_control_state(self, control: ControlState, enabled: bool) -> None:
        self.control_calls.append((control, enabled))

    def clear_control_states(self) -> None:
        self.cleared += 1

    def look_at(self, point: Vec3) -> None:
        self.looks.append(point)

    def mount_nearest(self, predicate: Callable[[EntityInfo], bool]) -> Optional[EntityInfo]:
        for entity in self.entities:
            if predicate(entity):
                self.vehicle = entity
                return entity
        return None

    def dismount(self) -> None:
        self.dismounted += 1
        self.vehicle = None

    def move_vehicle(self, sideways: float, forward: float) -> None:
        self.vehicle_moves.append((sideways, forward))

    def attack_nearest(self) -> Optional[EntityInfo]:
        if not self.entities:
            return None
        self.attacked.append(self.entities[0])
        return self.entities[0]

    # queries
    def query_position(self) -> Vec3:
        return self.position

    def query_orientation(self) -> Orientation:
        return self.orientation

    def query_nearby_entities(self) -> List[EntityInfo]:
        return list(self.entities)

    def query_players(self) -> Dict[str, PlayerInfo]:
        return dict(self.players)

    def query_vitals(self) -> Vitals:
        return self.vitals

    def query_entity(self, entity_id: int) -> Optional[EntityInfo]:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        for player in self.players.values():
            if player.entity is not None and player.entity.id == entity_id:
                return player.entity
        return None

    def current_vehicle(self) -> Optional[EntityInfo]:
        return self.vehicle


def _make_player(name: str, entity_id: int, position: Vec3 = Vec3(3.0, 64.0, 4.0)) -> PlayerInfo:
    return PlayerInfo(
        username=name,
        entity=EntityInfo(id=entity_id, name="player", display_name=name, type="player", position=position, height=1.8),
    )


@pytest.fixture
def make_player() -> Callable[..., PlayerInfo]:
    return _make_player


@pytest.fixture
def env() -> FakeEnvironmentSession:
    return FakeEnvironmentSession()


@pytest.fixture
def registry() -> CapabilityRegistry:
    return build_default_registry()


@pytest.fixture
def target() -> TargetReference:
    return TargetReference()


@pytest.fixture
def ctx(env: FakeEnvironmentSession, target: TargetReference, registry: CapabilityRegistry) -> CapabilityContext:
    return CapabilityContext(env=env, target=target, registry=registry)


@pytest.fixture(autouse=True)
def _block_model_requests(monkeypatch: pytest.MonkeyPatch):
    """Unit tests only talk to FunctionModel/TestModel, never to a real provider."""
    monkeypatch.setattr(models, "ALLOW_MODEL_REQUESTS", False)
    yield


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
    yield
