"""Application layer - Billing-date queries, presets, and port definitions.

This layer contains:
- Use Cases: Query API over recurrence rules and canonical rule presets
- Ports: Abstract interfaces (protocols) for external dependencies
- DTOs: Data transfer objects for use case output

The application layer depends only on the domain layer and configuration.
Infrastructure implementations are injected via ports.
"""
