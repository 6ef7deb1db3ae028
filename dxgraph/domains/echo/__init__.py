"""
Echocardiographic diastolic-function algorithms.

Algorithms are validated on first use and the registry is cached; a registry
is read-only, so one instance is shared by every session.
"""

from __future__ import annotations
from collections.abc import Callable
from functools import lru_cache

from ...registry import NodeRegistry, load_registry
from .ase2016 import ASE2016
from .mayo2025 import MAYO2025


def create_ase2016_registry(**kwargs) -> NodeRegistry:
    """Build a fresh, validated ASE/EACVI 2016 registry."""
    return load_registry(ASE2016, **kwargs)


def create_mayo2025_registry(**kwargs) -> NodeRegistry:
    """Build a fresh, validated Mayo 2025 registry."""
    return load_registry(MAYO2025, **kwargs)


_FACTORIES: dict[str, Callable[..., NodeRegistry]] = {
    ASE2016["id"]: create_ase2016_registry,
    MAYO2025["id"]: create_mayo2025_registry,
}

_DEFINITIONS = {ASE2016["id"]: ASE2016, MAYO2025["id"]: MAYO2025}


def list_algorithms() -> list[dict[str, str]]:
    """Id, name and mode ids of every bundled algorithm."""
    return [
        {
            "id": algorithm_id,
            "name": definition["name"],
            "modes": ", ".join(m["id"] for m in definition["modes"]),
        }
        for algorithm_id, definition in _DEFINITIONS.items()
    ]


def create_registry(algorithm_id: str, **kwargs) -> NodeRegistry:
    """Fresh registry for a bundled algorithm; raises ValueError for unknown ids."""
    factory = _FACTORIES.get(algorithm_id)
    if factory is None:
        raise ValueError(f"Unknown algorithm: {algorithm_id}. Available: {sorted(_FACTORIES)}")
    return factory(**kwargs)


@lru_cache(maxsize=None)
def get_algorithm(algorithm_id: str) -> NodeRegistry:
    """Shared registry for a bundled algorithm."""
    return create_registry(algorithm_id)


__all__ = [
    "ASE2016",
    "MAYO2025",
    "create_ase2016_registry",
    "create_mayo2025_registry",
    "create_registry",
    "get_algorithm",
    "list_algorithms",
]
