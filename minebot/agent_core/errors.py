"""Error types for the agent core.

Registration and configuration errors are raised at start-up and are fatal.
Everything raised while serving a command (unknown capability, bad input,
capability or engine failure) is converted into a failure ``Outcome`` or the
apology reply by the component that owns it, and never reaches the process.
"""

from __future__ import annotations

from typing import Optional


class MinebotError(Exception):
    """Base error for all minebot exceptions."""


class ConfigurationError(MinebotError):
    """Raised when settings cannot produce a working component."""


class ValidationError(MinebotError):
    """Raised for a malformed capability registration or capability input."""


class InputValidationError(ValidationError):
    """Raised when raw capability input does not satisfy the input schema."""

    def __init__(self, capability: str, field: str, constraint: str) -> None:
        self.capability = capability
        self.field = field
        self.constraint = constraint
        super().__init__(f"Invalid input for '{capability}': field '{field}' {constraint}")


class UnknownCapability(MinebotError):
    """Raised when a capability name is not part of the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown capability: '{name}'")


class CapabilityFault(MinebotError):
    """Raised when a capability implementation fails internally."""

    def __init__(self, capability: str, cause: BaseException) -> None:
        self.capability = capability
        self.cause = cause
        super().__init__(f"{capability} failed: {cause}")


class EngineFault(MinebotError):
    """Raised when the reasoning engine call itself fails."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)
