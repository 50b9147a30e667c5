"""Capability registry.

The registry maps a ``CapabilityName`` to its implementation, validates raw
input against the capability's input schema and executes it.

Lifecycle: capabilities are registered once at start-up, then ``seal()``
checks that every ``CapabilityName`` has an implementation and freezes the
registry. The registry itself is effect-free bookkeeping; all side effects
happen inside capability implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from minebot.core.logging_config import get_logger

from ..errors import CapabilityFault, InputValidationError, UnknownCapability, ValidationError
from .base import Capability, CapabilityContext, CapabilityName, Outcome

logger = get_logger(__name__)


@dataclass(frozen=True)
class CapabilityDescription:
    """Name and description of a registered capability."""

    name: str
    description: str


class CapabilityRegistry:
    """
    In-memory mapping of capability names to implementations.

    Notes:
        - ``register`` rejects duplicate names and malformed schemas.
        - ``invoke`` raises ``UnknownCapability`` / ``InputValidationError``;
          ``dispatch`` converts both into failure outcomes.
        - A fault inside a capability never propagates out of ``invoke``.
    """

    def __init__(self) -> None:
        """Initialize an empty capability registry."""
        self._caps: Dict[CapabilityName, Capability] = {}
        self._sealed = False

    def register(self, cap: Capability) -> None:
        """
        Register a capability implementation.

        Args:
            cap: The capability instance to register.

        Raises:
            ValidationError: If the registry is sealed, the name is unknown or
                already registered, or the description or input schema is malformed.
        """
        if self._sealed:
            raise ValidationError(f"Registry is sealed; cannot register '{getattr(cap, 'name', cap)}'")

        name = getattr(cap, "name", None)
        if not isinstance(name, CapabilityName):
            raise ValidationError(f"Capability name must be a CapabilityName, got {name!r}")
        if name in self._caps:
            raise ValidationError(f"Capability '{name.value}' is already registered")
        if not str(getattr(cap, "description", "") or "").strip():
            raise ValidationError(f"Capability '{name.value}' has no description")

        schema = getattr(cap, "input_schema", None)
        if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
            raise ValidationError(f"Capability '{name.value}' input schema must be a pydantic model")
        try:
            json_schema = schema.model_json_schema()
        except Exception as e:
            raise ValidationError(f"Capability '{name.value}' input schema is malformed: {e}") from e
        if json_schema.get("type") != "object":
            raise ValidationError(f"Capability '{name.value}' input schema must describe an object")

        self._caps[name] = cap
        logger.debug(f"Registered capability: {name.value}")

    def seal(self) -> None:
        """Freeze the registry after checking every capability name is implemented.

        Raises:
            ValidationError: If any ``CapabilityName`` has no implementation.
        """
        missing = [n.value for n in CapabilityName if n not in self._caps]
        if missing:
            raise ValidationError(f"Capabilities without implementation: {', '.join(missing)}")
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, name: str | CapabilityName) -> Capability:
        """
        Retrieve a registered capability by name.

        Raises:
            UnknownCapability: If no capability is registered with the given name.
        """
        key = self._resolve(name)
        if key is None or key not in self._caps:
            raise UnknownCapability(getattr(name, "value", str(name)))
        return self._caps[key]

    def has(self, name: str | CapabilityName) -> bool:
        key = self._resolve(name)
        return key is not None and key in self._caps

    def names(self) -> List[str]:
        return [n.value for n in self._caps]

    def capabilities(self) -> List[Capability]:
        return list(self._caps.values())

    def describe(self) -> List[CapabilityDescription]:
        """Return name and description of every capability in registration order."""
        return [CapabilityDescription(name=n.value, description=c.description) for n, c in self._caps.items()]

    def describe_text(self) -> str:
        return "\n".join(f"- {d.name}: {d.description}" for d in self.describe())

    def validate_input(self, name: str | CapabilityName, raw_input: Optional[Mapping[str, Any]]) -> BaseModel:
        """
        Validate raw input against the capability's input schema.

        Raises:
            UnknownCapability: If the capability is not registered.
            InputValidationError: Reporting the first field and constraint violated.
        """
        cap = self.get(name)
        try:
            return cap.input_schema.model_validate(dict(raw_input or {}))
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error.get("loc", ())) or "<input>"
            raise InputValidationError(cap.name.value, field, error.get("msg", "is invalid")) from e

    async def invoke(
        self,
        name: str | CapabilityName,
        raw_input: Optional[Mapping[str, Any]],
        ctx: CapabilityContext,
    ) -> Outcome:
        """
        Validate input and execute a capability.

        Args:
            name: Capability name as selected by the reasoning engine.
            raw_input: Unvalidated arguments.
            ctx: Execution context.

        Returns:
            The capability's ``Outcome``; internal faults become a failure outcome.

        Raises:
            UnknownCapability: If the name is not registered.
            InputValidationError: If the input does not satisfy the schema.
        """
        cap = self.get(name)
        args = self.validate_input(cap.name, raw_input)
        try:
            return await cap.execute(ctx, args=args)
        except Exception as e:
            fault = CapabilityFault(cap.name.value, e)
            logger.error(str(fault), exc_info=True)
            return Outcome.fail(str(fault))

    async def dispatch(
        self,
        name: str | CapabilityName,
        raw_input: Optional[Mapping[str, Any]],
        ctx: CapabilityContext,
    ) -> Outcome:
        """Like ``invoke`` but lookup and validation errors become failure outcomes."""
        try:
            return await self.invoke(name, raw_input, ctx)
        except (UnknownCapability, InputValidationError) as e:
            logger.info(f"Rejected capability call {getattr(name, 'value', name)!r}: {e}")
            return Outcome.fail(str(e))

    @staticmethod
    def _resolve(name: str | CapabilityName) -> Optional[CapabilityName]:
        if isinstance(name, CapabilityName):
            return name
        try:
            return CapabilityName(name)
        except ValueError:
            return None
