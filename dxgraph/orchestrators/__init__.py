"""
Orchestrators package for decision-graph sessions.

Both implementations satisfy the TraversalEngine protocol and produce the same
route for the same answers:
- BaseOrchestrator: plain Python driver with JSON dump/load of sessions
- BurrOrchestrator: each session is a Burr application (optional tracking)
"""

from __future__ import annotations

from ..config import EngineConfig
from ..interfaces import NodeIndex, TraversalEngine
from .base_orchestrator import BaseOrchestrator, replay_answers
from .burr_orchestrator import BurrOrchestrator, BurrSession, build_app

ENGINE_KINDS = ("base", "burr")


def create_traversal_engine(
    registry: NodeIndex,
    kind: str = "base",
    config: EngineConfig | None = None,
    **kwargs,
) -> TraversalEngine:
    """Create a traversal engine of the given kind over a registry."""
    if kind == "base":
        return BaseOrchestrator(registry, config, **kwargs)
    if kind == "burr":
        return BurrOrchestrator(registry, config, **kwargs)
    raise ValueError(f"Unknown engine kind {kind!r}; expected one of {ENGINE_KINDS}")


__all__ = [
    "BaseOrchestrator",
    "BurrOrchestrator",
    "BurrSession",
    "ENGINE_KINDS",
    "build_app",
    "create_traversal_engine",
    "replay_answers",
]
