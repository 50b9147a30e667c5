"""minebot: a chat-commanded agent for a live Minecraft-style world."""

__version__ = "0.1.0"
