"""
Application layer - Orchestration of forum consensus and execution.

This layer contains:
- Ports: contracts for the store, clock, agent directory, submission
  capabilities and metrics
- Services: proposal lifecycle, discussion scheduler, execution coordinator

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, bootstrap
"""
