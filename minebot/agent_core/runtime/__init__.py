"""Runtime loops: the agent control loop and the target-tracking loop.

The two loops run on the same event loop and share only the
``TargetReference``.
"""

from .control_loop import APOLOGY_MESSAGE, AgentControlLoop, truncate_message
from .models import Command, SessionReport, SessionStatus
from .tracking import TargetReference, TargetTracker, TrackedTarget

__all__ = [
    "APOLOGY_MESSAGE",
    "AgentControlLoop",
    "Command",
    "SessionReport",
    "SessionStatus",
    "TargetReference",
    "TargetTracker",
    "TrackedTarget",
    "truncate_message",
]
