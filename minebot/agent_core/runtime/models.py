"""Per-command data types of the agent control loop.

A ``Command`` is created for every chat message that passes the operator and
prefix filter and is discarded once the loop finishes. ``SessionReport``
summarizes what the loop did with it; nothing is persisted.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..abstraction.base import TranscriptEntry


class Command(BaseModel):
    """An operator command derived from one chat message."""

    model_config = ConfigDict(frozen=True)

    operator: str = Field(..., description="Identity of the sender")
    raw_text: str = Field(..., description="The chat message as received")
    directive: str = Field(..., description="Text after the invocation prefix, trimmed")


class SessionStatus(str, Enum):
    """How the control loop ended for one chat message."""

    ignored = "ignored"  # not from the operator or without the prefix
    empty = "empty"  # prefix with nothing after it
    communicated = "communicated"  # the engine used the chat capability
    fallback = "fallback"  # the loop relayed the engine's free text
    apology = "apology"  # the engine failed; the fixed apology was sent


class SessionReport(BaseModel):
    """Summary of one control loop run."""

    status: SessionStatus
    command: Optional[Command] = None
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    fallback_text: Optional[str] = Field(None, description="Text sent by the loop itself, if any")
