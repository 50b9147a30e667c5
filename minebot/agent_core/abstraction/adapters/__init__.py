"""Framework adapters implementing ``ReasoningEngine``."""

from .pydantic_ai import FINAL_REPLY_TOOL, FinalReply, PydanticAIReasoningEngine

__all__ = ["FINAL_REPLY_TOOL", "FinalReply", "PydanticAIReasoningEngine"]
