"""Domain layer - Core billing calendar logic, value objects, and rules.

This layer contains:
- Value Objects: Immutable objects defined by their attributes (e.g., Money, RecurrenceRule)
- Generators: Stateless strategies that expand a rule into occurrence dates
- Domain Exceptions: Business rule violations

The domain layer has no dependencies on the application or infrastructure layers.
"""
