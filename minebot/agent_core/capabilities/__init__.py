"""Capability registry and built-in capabilities.

A *capability* is one named, schema-validated action against the environment.

- The reasoning engine selects capabilities by name.
- ``CapabilityRegistry`` validates the raw input and executes the capability
  with a ``CapabilityContext`` (environment session, target reference and the
  registry itself).
- Every invocation yields an ``Outcome``; faults inside capabilities become
  failure outcomes instead of exceptions.

This package exports:

- ``Capability``: protocol for async capability execution.
- ``CapabilityName``: the closed set of capability identifiers.
- ``CapabilityRegistry``: name -> capability implementation mapping.
- ``CapabilityContext``/``Outcome``: execution input/output models.
"""

from .base import COMMUNICATION_CAPABILITY, Capability, CapabilityContext, CapabilityName, Outcome
from .registry import CapabilityDescription, CapabilityRegistry

__all__ = [
    "COMMUNICATION_CAPABILITY",
    "Capability",
    "CapabilityContext",
    "CapabilityDescription",
    "CapabilityName",
    "CapabilityRegistry",
    "Outcome",
]
