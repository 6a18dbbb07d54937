"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from forum_engine.config.engine_config import EngineConfig
from forum_engine.infrastructure.observability import configure_structlog


def configure_from_config(config: EngineConfig) -> None:
    """Configure structlog for the engine's environment.

    Call once at process start, before ``build_engine``.
    """
    configure_structlog(environment=config.environment)


__all__ = ["configure_from_config"]
