"""
Core interfaces for decision-graph traversal.

These protocols define the contracts between layers:
- NodeIndex: immutable node registry for one algorithm
- DecisionEvaluator: pure logic-node decisions over the answer store
- TraversalEngine: the step-by-step session API consumed by a UI or CLI
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Protocol

from .rules import NodeId
from .types import Algorithm, LogicNode, Mode, Node, Question, Session, SessionView


class DecisionEvaluator(Protocol):
    """
    Protocol for logic-node evaluation.

    Must be deterministic and side-effect free: the same answers always yield
    the same next node, and neither the answers nor the registry are mutated.
    """

    def evaluate(self, node: LogicNode, answers: Mapping[str, str]) -> NodeId:
        """Return the next node identifier for a logic node."""
        ...


class NodeIndex(Protocol):
    """
    Protocol for read-only node lookup.

    Loaded once per algorithm and shared by every session without locking.
    """

    algorithm: Algorithm
    evaluator: DecisionEvaluator

    def lookup(self, node_id: NodeId, referenced_by: str | None = None) -> Node:
        """Get a node by its ID; raise UnknownNodeError if absent."""
        ...

    def get(self, node_id: NodeId) -> Node | None:
        """Get a node by its ID, or None if not found."""
        ...

    def mode(self, mode_id: str) -> Mode:
        """Get an entry mode; raise UnknownModeError if absent."""
        ...

    def successors(self, node_id: NodeId) -> list[NodeId]:
        """Every node id a node may route to."""
        ...


class TraversalEngine(Protocol):
    """
    Protocol for the traversal driver.

    Input nodes suspend for an external answer, logic nodes auto-advance, and
    result nodes terminate the session.
    """

    registry: NodeIndex

    def start(self, mode_id: str) -> Session:
        """Start a new session at a mode's entry node."""
        ...

    def answer(self, session: Session, value: str) -> SessionView:
        """Record an answer for the current input node and advance."""
        ...

    def current_question(self, session: Session) -> Question | None:
        """Prompt and options for the current input node, or None if terminal."""
        ...

    def is_terminal(self, session: Session) -> bool:
        """True once the session reached a result node (or failed)."""
        ...

    def outcome(self, session: Session) -> str:
        """Result key of a completed session."""
        ...

    def view(self, session: Session) -> SessionView:
        """Read-only snapshot of the session."""
        ...

    def reset(self, session: Session) -> SessionView:
        """Discard answers and restart at the session's mode entry node."""
        ...
