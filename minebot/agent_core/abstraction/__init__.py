"""Reasoning engine abstraction.

- ``ReasoningEngine``: framework-agnostic engine client interface.
- ``EngineRequest`` / ``EngineResult`` / ``TranscriptEntry``: its input and output.
- ``adapters.PydanticAIReasoningEngine``: the Pydantic AI implementation.
- ``model_provider``: builds the Pydantic AI model from settings.
"""

from .base import EngineRequest, EngineResult, ReasoningEngine, TranscriptEntry

__all__ = [
    "EngineRequest",
    "EngineResult",
    "ReasoningEngine",
    "TranscriptEntry",
]
