"""Data Transfer Objects for use case input/output."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleValidation:
    """Outcome of a pre-flight rule check; ``error`` is set only when invalid."""

    valid: bool
    error: str | None = None
