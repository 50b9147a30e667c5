from __future__ import annotations

from ..capabilities import COMMUNICATION_CAPABILITY, CapabilityName, CapabilityRegistry

_SYSTEM_TEMPLATE = """You are {bot_name}, a helpful AI assistant controlling a Minecraft bot. Keep responses concise and friendly.

You have access to the following tools:
{tool_descriptions}

IMPORTANT: Every time you handle a request you MUST use the {chat} tool exactly once to respond to the player before you finish. Never respond without using the {chat} tool.
When the user asks what tools you have or what you can do, use the {list_tools} tool first, then use the {chat} tool to tell them the result."""

_USER_TEMPLATE = """Player {operator} said: {directive}

Remember: You MUST use the {chat} tool to respond."""


def build_system_directive(registry: CapabilityRegistry, *, bot_name: str) -> str:
    return _SYSTEM_TEMPLATE.format(
        bot_name=bot_name,
        tool_descriptions=registry.describe_text(),
        chat=COMMUNICATION_CAPABILITY.value,
        list_tools=CapabilityName.list_tools.value,
    )


def build_user_directive(*, operator: str, directive: str) -> str:
    return _USER_TEMPLATE.format(operator=operator, directive=directive, chat=COMMUNICATION_CAPABILITY.value)
