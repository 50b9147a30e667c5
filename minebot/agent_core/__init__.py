"""Agent core: capabilities, the reasoning engine abstraction and the runtime loops.

Design overview
---------------

- ``capabilities``: the fixed, typed registry of actions against the
  environment. Every call is validated and yields an ``Outcome``.
- ``abstraction``: the reasoning engine client interface and its Pydantic AI
  adapter. The engine drives capability calls until it is done or the step
  budget runs out.
- ``runtime``: the agent control loop, which guarantees a chat reply for
  every operator command, and the target-tracking loop.

Typical usage
-------------

1. ``build_default_registry()`` once at start-up.
2. ``build_control_loop(...)`` and ``build_tracker(...)`` once the environment
   session is connected.
3. Feed chat events to ``AgentControlLoop.handle_chat``.
"""

from .capabilities import CapabilityName, CapabilityRegistry, Outcome
from .errors import (
    CapabilityFault,
    ConfigurationError,
    EngineFault,
    InputValidationError,
    MinebotError,
    UnknownCapability,
    ValidationError,
)
from .factory import build_control_loop, build_default_registry, build_tracker

__all__ = [
    "CapabilityName",
    "CapabilityRegistry",
    "Outcome",
    "CapabilityFault",
    "ConfigurationError",
    "EngineFault",
    "InputValidationError",
    "MinebotError",
    "UnknownCapability",
    "ValidationError",
    "build_control_loop",
    "build_default_registry",
    "build_tracker",
]
