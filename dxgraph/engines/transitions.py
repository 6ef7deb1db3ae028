"""
Transition Resolver: next node for an answered input node.

Lookup order is the exact option value, then the ``"*"`` wildcard. A wildcard
lets a purely data-gathering question always proceed to the same node.
"""

from __future__ import annotations

from ..errors import NoMatchingTransitionError
from ..rules import NodeId, WILDCARD
from ..types import InputNode


def resolve(node: InputNode, value: str) -> NodeId:
    """Return the next node identifier for ``value`` answered at ``node``."""
    if value in node.edges:
        return node.edges[value]
    if WILDCARD in node.edges:
        return node.edges[WILDCARD]
    raise NoMatchingTransitionError(node.id, value)


class TransitionResolver:
    """Object form of ``resolve`` for callers that inject collaborators."""

    def resolve(self, node: InputNode, value: str) -> NodeId:
        return resolve(node, value)
