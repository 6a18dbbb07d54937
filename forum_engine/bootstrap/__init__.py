"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so that the
application layer depends only on ports.
"""

from forum_engine.bootstrap.engine import ForumEngine, build_engine
from forum_engine.bootstrap.logging import configure_from_config

__all__ = ["ForumEngine", "build_engine", "configure_from_config"]
