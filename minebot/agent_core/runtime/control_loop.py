"""Agent control loop.

Turns one operator chat message into a reasoning engine session and makes
sure the operator always gets a visible reply.

Workflow
--------

1. Filter: only messages from the configured operator that start with the
   invocation prefix are handled; everything else is ignored silently. A
   prefix with nothing after it is also ignored.
2. Build a fresh session (system directive with the capability list and the
   "must chat" mandate, user directive with the command) and invoke the
   reasoning engine with the step budget, bounded by an optional timeout.
3. If the transcript contains a successful ``chat`` invocation the job is done.
4. Otherwise relay the engine's free text through ``chat``, truncated to the
   environment's message limit.
5. If the engine fails, times out, or ends with neither a chat call nor any
   text, log it and send the fixed apology through ``chat``.

Nothing raised while serving a command escapes ``handle_chat``. The engine is
never retried.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from minebot.core.logging_config import get_logger

from ..abstraction.base import EngineRequest, EngineResult, ReasoningEngine
from ..capabilities import COMMUNICATION_CAPABILITY, CapabilityContext, CapabilityRegistry
from ..errors import EngineFault
from .models import Command, SessionReport, SessionStatus
from .prompts import build_system_directive, build_user_directive

logger = get_logger(__name__)

APOLOGY_MESSAGE = "Sorry, I encountered an error processing that request."
TRUNCATION_MARKER = "..."
DEFAULT_STEP_BUDGET = 10
DEFAULT_MAX_CHAT_LENGTH = 256


def truncate_message(text: str, limit: int = DEFAULT_MAX_CHAT_LENGTH) -> Tuple[str, bool]:
    """Fit ``text`` into ``limit`` characters.

    A shortened message ends with ``TRUNCATION_MARKER`` (counted inside the
    limit) so the reader can tell it was cut.

    Returns:
        The message to send and whether it was truncated.
    """
    if len(text) <= limit:
        return text, False
    return text[: limit - len(TRUNCATION_MARKER)].rstrip() + TRUNCATION_MARKER, True


class AgentControlLoop:
    """Handle operator chat commands with the reasoning engine."""

    def __init__(
        self,
        *,
        registry: CapabilityRegistry,
        engine: ReasoningEngine,
        context: CapabilityContext,
        operator: str,
        command_prefix: str,
        bot_name: str,
        step_budget: int = DEFAULT_STEP_BUDGET,
        engine_timeout: Optional[float] = None,
        max_chat_length: int = DEFAULT_MAX_CHAT_LENGTH,
    ) -> None:
        self._registry = registry
        self._engine = engine
        self._context = context
        self._operator = operator
        self._prefix = command_prefix
        self._bot_name = bot_name
        self._step_budget = step_budget
        self._engine_timeout = engine_timeout or None
        self._max_chat_length = max_chat_length
        self._system_directive = build_system_directive(registry, bot_name=bot_name)

    @property
    def system_directive(self) -> str:
        return self._system_directive

    def parse_command(self, sender: str, text: str) -> Optional[Command]:
        """Return the command carried by a chat message, or None if the message is not a trigger."""
        if sender == self._bot_name or sender != self._operator:
            return None
        if not text.startswith(self._prefix):
            return None
        return Command(operator=sender, raw_text=text, directive=text[len(self._prefix) :].strip())

    async def handle_chat(self, sender: str, text: str) -> SessionReport:
        """Run the control loop for one inbound chat message."""
        command = self.parse_command(sender, text)
        if command is None:
            return SessionReport(status=SessionStatus.ignored)
        if not command.directive:
            logger.debug(f"Ignoring empty command from {sender}")
            return SessionReport(status=SessionStatus.empty, command=command)

        logger.info(f"Command from {sender}: {command.directive}")
        request = EngineRequest(
            system_directive=self._system_directive,
            user_directive=build_user_directive(operator=command.operator, directive=command.directive),
            registry=self._registry,
            context=self._context,
            step_budget=self._step_budget,
            tool_choice="required",
        )

        try:
            result = await self._call_engine(request)
        except Exception as e:
            logger.error(f"Reasoning engine failed for {command.directive!r}: {e}", exc_info=True)
            return await self._apologize(command)

        if result.succeeded(COMMUNICATION_CAPABILITY):
            logger.info(f"Command handled with {len(result.transcript)} capability calls")
            return SessionReport(status=SessionStatus.communicated, command=command, transcript=result.transcript)

        final_text = (result.final_text or "").strip()
        if final_text:
            message, truncated = truncate_message(final_text, self._max_chat_length)
            if truncated:
                logger.warning(f"Fallback reply truncated from {len(final_text)} to {len(message)} characters")
            logger.info("Engine did not use chat; relaying its final text")
            await self._say(message)
            return SessionReport(
                status=SessionStatus.fallback,
                command=command,
                transcript=result.transcript,
                fallback_text=message,
            )

        reason = "step budget exhausted" if result.budget_exhausted else "engine finished without a reply"
        logger.error(f"No reply produced for {command.directive!r}: {reason}")
        return await self._apologize(command, result)

    async def _call_engine(self, request: EngineRequest) -> EngineResult:
        if self._engine_timeout is None:
            return await self._engine.invoke(request)
        try:
            return await asyncio.wait_for(self._engine.invoke(request), timeout=self._engine_timeout)
        except asyncio.TimeoutError as e:
            raise EngineFault(f"Reasoning engine timed out after {self._engine_timeout}s") from e

    async def _apologize(self, command: Command, result: Optional[EngineResult] = None) -> SessionReport:
        await self._say(APOLOGY_MESSAGE)
        return SessionReport(
            status=SessionStatus.apology,
            command=command,
            transcript=result.transcript if result is not None else [],
            fallback_text=APOLOGY_MESSAGE,
        )

    async def _say(self, message: str) -> None:
        outcome = await self._registry.dispatch(COMMUNICATION_CAPABILITY, {"message": message}, self._context)
        if not outcome.success:
            logger.error(f"Could not send reply: {outcome.message}")
