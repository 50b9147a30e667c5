"""Pydantic AI reasoning engine adapter.

This module implements ``ReasoningEngine`` on top of a Pydantic AI ``Agent``.
A fresh agent is built for every session so that no conversation state leaks
between commands:

- every registered capability becomes a tool generated from its input JSON
  schema; tool calls are dispatched through the registry and recorded in the
  session transcript,
- with ``tool_choice="required"`` the run ends through the ``final_reply``
  output tool, so the model can never answer with plain text alone; capability
  calls issued in the same response as ``final_reply`` still run,
- the step budget maps to ``UsageLimits(request_limit=...)``.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field
from pydantic_ai import Agent, Tool, ToolOutput
from pydantic_ai.exceptions import UsageLimitExceeded
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings
from pydantic_ai.usage import UsageLimits

from minebot.core.logging_config import get_logger

from ...capabilities import Capability
from ...errors import EngineFault
from ..base import EngineRequest, EngineResult, ReasoningEngine, TranscriptEntry

logger = get_logger(__name__)

FINAL_REPLY_TOOL = "final_reply"


class FinalReply(BaseModel):
    """Output schema of the ``final_reply`` tool."""

    text: str = Field(default="", description="Optional closing remark; the player only sees it if chat was not used")


class PydanticAIReasoningEngine(ReasoningEngine):
    """Reasoning engine backed by Pydantic AI.

    Attributes:
        _model: Pydantic AI model instance or model name
        _model_settings: Optional model settings (temperature, max_tokens)
    """

    def __init__(self, model: Union[Model, str], *, model_settings: Optional[ModelSettings] = None) -> None:
        self._model = model
        self._model_settings = model_settings

    def build_agent(self, request: EngineRequest, transcript: List[TranscriptEntry]) -> Agent:
        """Build the per-session agent with one tool per registered capability."""
        tools = [self._make_tool(cap, request, transcript) for cap in request.registry.capabilities()]

        kwargs: Dict[str, Any] = {
            "system_prompt": request.system_directive,
            "tools": tools,
            # Run every tool call of a response, including ones issued next to final_reply.
            "end_strategy": "exhaustive",
        }
        if request.tool_choice == "required":
            kwargs["output_type"] = ToolOutput(
                FinalReply,
                name=FINAL_REPLY_TOOL,
                description="Call this once you are done and have already replied with the chat tool.",
            )
        else:
            kwargs["output_type"] = str
        if self._model_settings:
            kwargs["model_settings"] = self._model_settings

        return Agent(self._model, **kwargs)

    @staticmethod
    def _make_tool(cap: Capability, request: EngineRequest, transcript: List[TranscriptEntry]) -> Tool:
        name = cap.name.value

        async def _call(**kwargs: Any) -> Dict[str, Any]:
            outcome = await request.registry.dispatch(name, kwargs, request.context)
            transcript.append(TranscriptEntry(capability=name, input=dict(kwargs), outcome=outcome))
            logger.debug(f"Capability {name} -> success={outcome.success}: {outcome.message}")
            return outcome.model_dump(mode="json")

        return Tool.from_schema(
            _call,
            name=name,
            description=cap.description,
            json_schema=cap.input_schema.model_json_schema(),
        )

    async def invoke(self, request: EngineRequest) -> EngineResult:
        """Run the session through Pydantic AI.

        Raises:
            EngineFault: If the model call or the response handling fails
        """
        transcript: List[TranscriptEntry] = []
        agent = self.build_agent(request, transcript)
        limits = UsageLimits(request_limit=request.step_budget)

        logger.debug(f"Invoking reasoning engine: tools={len(request.registry.names())}, budget={request.step_budget}")
        try:
            result = await agent.run(request.user_directive, usage_limits=limits)
            output = result.output
            final_text = output.text if isinstance(output, FinalReply) else str(output or "")
            metadata = self._metadata()
            metadata["usage"] = self._usage(result)
        except UsageLimitExceeded as e:
            logger.warning(f"Reasoning engine hit the step budget ({request.step_budget}): {e}")
            return EngineResult(transcript=list(transcript), budget_exhausted=True, metadata=self._metadata())
        except Exception as e:
            raise EngineFault(f"Reasoning engine call failed: {e}", cause=e) from e

        return EngineResult(transcript=list(transcript), final_text=final_text or None, metadata=metadata)

    @staticmethod
    def _usage(result: Any) -> Dict[str, Any]:
        # Older 1.x releases expose usage as a method, newer ones as a property.
        usage = result.usage
        if callable(usage) and not hasattr(usage, "requests"):
            usage = usage()
        return {
            "requests": getattr(usage, "requests", None),
            "input_tokens": getattr(usage, "input_tokens", None),
            "output_tokens": getattr(usage, "output_tokens", None),
        }

    def _metadata(self) -> Dict[str, Any]:
        model_name = self._model if isinstance(self._model, str) else getattr(self._model, "model_name", None)
        return {"model": model_name, "framework": "pydantic_ai"}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self._metadata()['model']})"
