"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- Time Provider: Clock abstraction for testability

Infrastructure adapters implement the ports defined in the application layer.
"""

from recurring_billing.infrastructure.time_provider import FixedTimeProvider, SystemTimeProvider

__all__ = [
    "FixedTimeProvider",
    "SystemTimeProvider",
]
