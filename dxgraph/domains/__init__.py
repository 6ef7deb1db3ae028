"""
Domain content for dxgraph.

Each domain package declares algorithm graphs as plain data and exposes
factory functions that return validated registries.
"""

from .echo import (
    create_ase2016_registry, create_mayo2025_registry, create_registry, get_algorithm, list_algorithms,
)

__all__ = [
    "create_ase2016_registry",
    "create_mayo2025_registry",
    "create_registry",
    "get_algorithm",
    "list_algorithms",
]
