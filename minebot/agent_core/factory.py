"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default capability registry
and the two runtime loops from settings, keeping application wiring and tests
concise.
"""

from __future__ import annotations

from minebot.core.config import AgentLoopConfig
from minebot.environment.session import EnvironmentSession

from .abstraction.base import ReasoningEngine
from .capabilities import CapabilityContext, CapabilityRegistry
from .capabilities.builtin import builtin_capabilities
from .runtime.control_loop import AgentControlLoop
from .runtime.tracking import TargetReference, TargetTracker


def build_default_registry() -> CapabilityRegistry:
    """Build and seal the ``CapabilityRegistry`` with every built-in capability.

    Raises:
        ValidationError: If a capability is malformed or one is missing.
    """
    reg = CapabilityRegistry()
    for cap in builtin_capabilities():
        reg.register(cap)
    reg.seal()
    return reg


def build_control_loop(
    *,
    config: AgentLoopConfig,
    registry: CapabilityRegistry,
    engine: ReasoningEngine,
    env: EnvironmentSession,
    target: TargetReference,
) -> AgentControlLoop:
    """Construct an ``AgentControlLoop`` for a connected session."""
    return AgentControlLoop(
        registry=registry,
        engine=engine,
        context=CapabilityContext(env=env, target=target, registry=registry),
        operator=config.operator,
        command_prefix=config.command_prefix,
        bot_name=env.username,
        step_budget=config.step_budget,
        engine_timeout=config.engine_timeout,
        max_chat_length=config.max_chat_length,
    )


def build_tracker(*, config: AgentLoopConfig, env: EnvironmentSession, target: TargetReference) -> TargetTracker:
    return TargetTracker(env, target, interval=config.tracking_interval)
