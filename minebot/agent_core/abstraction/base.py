"""Base abstraction for the reasoning engine client.

The reasoning engine is an external multi-step tool-calling service. The
agent control loop hands it a system directive, a user directive, the
capability registry and a step budget; the engine iterates capability calls
on its own and returns the transcript of what it invoked plus optional final
text. Implementations must route every capability call through
``CapabilityRegistry.dispatch`` and record it in the transcript.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..capabilities import CapabilityContext, CapabilityName, CapabilityRegistry, Outcome


class TranscriptEntry(BaseModel):
    """One capability invocation made during a session."""

    model_config = ConfigDict(frozen=True)

    capability: str = Field(..., description="Name of the invoked capability")
    input: Dict[str, Any] = Field(default_factory=dict, description="Raw input as sent by the engine")
    outcome: Outcome = Field(..., description="Outcome returned to the engine")


@dataclass(frozen=True)
class EngineRequest:
    """Everything the engine needs for one session.

    Attributes:
        system_directive: Static instructions including the capability list
        user_directive: The operator's command
        registry: Capabilities the engine may call
        context: Execution context the capabilities run with
        step_budget: Maximum number of reasoning steps (model requests)
        tool_choice: ``required`` forces a capability call at every step
    """

    system_directive: str
    user_directive: str
    registry: CapabilityRegistry
    context: CapabilityContext
    step_budget: int = 10
    tool_choice: Literal["required", "auto"] = "required"

    def __post_init__(self) -> None:
        if self.step_budget < 1:
            raise ValueError(f"step_budget must be at least 1, got {self.step_budget}")
        if self.tool_choice not in ("required", "auto"):
            raise ValueError(f"tool_choice must be 'required' or 'auto', got {self.tool_choice!r}")


class EngineResult(BaseModel):
    """Result of one engine invocation.

    Attributes:
        transcript: Capability invocations in call order
        final_text: Free text the engine ended with, if any
        budget_exhausted: True when the step budget ran out before the engine finished
        metadata: Usage and model information
    """

    transcript: List[TranscriptEntry] = Field(default_factory=list)
    final_text: Optional[str] = Field(None)
    budget_exhausted: bool = Field(default=False)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def used(self, name: str | CapabilityName) -> bool:
        """Whether the transcript contains an invocation of ``name``."""
        key = name.value if isinstance(name, CapabilityName) else name
        return any(entry.capability == key for entry in self.transcript)

    def succeeded(self, name: str | CapabilityName) -> bool:
        """Whether ``name`` was invoked at least once with a successful outcome."""
        key = name.value if isinstance(name, CapabilityName) else name
        return any(entry.capability == key and entry.outcome.success for entry in self.transcript)


class ReasoningEngine(ABC):
    """Abstract base class for reasoning engine clients.

    Subclasses must implement ``invoke``. Network and protocol failures are
    raised as ``EngineFault``; running out of steps is reported through
    ``EngineResult.budget_exhausted`` instead of raising.
    """

    @abstractmethod
    async def invoke(self, request: EngineRequest) -> EngineResult:
        """Run one session to completion.

        Args:
            request: The session's directives, capabilities and budget

        Returns:
            EngineResult with the transcript and optional final text

        Raises:
            EngineFault: If the engine call itself fails
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
