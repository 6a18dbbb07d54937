"""
Infrastructure layer - Adapters for the application ports.

This layer contains:
- In-memory stubs for every persistence port and a scripted submission
  capability
- System clock, TTL cache, structlog configuration, Prometheus metrics

IMPORT RULES:
- CAN import from: domain, application, config
"""
