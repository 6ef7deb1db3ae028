"""
Stepping primitives shared by every orchestrator.

``apply_answer`` handles an input node; ``advance`` follows logic nodes until
the traversal needs an answer or reaches a result. Neither mutates the answer
store beyond what the caller hands over, so orchestrators stay thin.
"""

from __future__ import annotations
from collections.abc import Mapping

from ..errors import InvalidAnswerError, TraversalLoopError
from ..interfaces import NodeIndex
from ..rules import NodeId
from ..types import InputNode, LogicNode
from .transitions import resolve


def check_answer(node: InputNode, value: str) -> None:
    """Raise InvalidAnswerError unless ``value`` is a declared option of ``node``."""
    if value not in node.values:
        raise InvalidAnswerError(node.id, value, node.values)


def apply_answer(registry: NodeIndex, node: InputNode, value: str) -> NodeId:
    """Validate ``value`` and resolve the node it leads to (must exist)."""
    check_answer(node, value)
    target = resolve(node, value)
    registry.lookup(target, referenced_by=node.id)
    return target


def advance(
    registry: NodeIndex,
    node_id: NodeId,
    answers: Mapping[str, str],
    max_chain: int,
) -> tuple[NodeId, list[NodeId]]:
    """
    Auto-advance through consecutive logic nodes.

    Returns:
        (input-or-result node id reached, every node id visited including ``node_id``)

    Raises:
        TraversalLoopError: the chain exceeds ``max_chain`` or lands on an input
            node that was already answered in this session.
    """
    visited = [node_id]
    node = registry.lookup(node_id)
    steps = 0
    while isinstance(node, LogicNode):
        steps += 1
        if steps > max_chain:
            raise TraversalLoopError(
                f"Logic chain exceeded {max_chain} steps starting at {node_id!r}",
                path=[str(v) for v in visited],
            )
        target = registry.evaluator.evaluate(node, answers)
        node = registry.lookup(target, referenced_by=node.id)
        visited.append(target)

    if isinstance(node, InputNode) and node.id in answers:
        raise TraversalLoopError(
            f"Input node {node.id!r} revisited; it was already answered",
            path=[str(v) for v in visited],
        )
    return node.id, visited
