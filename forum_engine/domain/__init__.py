"""
Domain layer - Core rules of forum consensus.

This layer contains:
- Immutable models (forums, proposals, votes, messages, executions)
- Pure services (quorum evaluation, expiry, proposal risk)
- Domain errors

IMPORT RULES:
- CANNOT import from: application, infrastructure, config, bootstrap
"""
