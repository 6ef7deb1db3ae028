"""
Error taxonomy for decision-graph loading and traversal.

Two families:
- GraphDefinitionError: the algorithm graph itself is malformed. Raised at load
  time (construction is aborted) or at runtime (only the affected session fails).
- SessionError: the caller misused a session. Recoverable; the session is left
  exactly as it was.
"""

from __future__ import annotations
from typing import Any


class DxGraphError(Exception):
    """Base exception for all decision-graph errors."""

    def __init__(
        self,
        message: str,
        code: str = "DXGRAPH_ERROR",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a JSON-compatible dict."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Graph definition errors (fatal)
# =============================================================================

class GraphDefinitionError(DxGraphError):
    """Structural defect in an algorithm graph."""

    def __init__(self, message: str, code: str = "GRAPH_DEFINITION_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, details=details)


class UnknownNodeError(GraphDefinitionError):
    """Reference to a node identifier that the registry does not contain."""

    def __init__(self, node_id: str, referenced_by: str | None = None):
        where = f" (referenced by {referenced_by!r})" if referenced_by else ""
        super().__init__(
            f"Unknown node {node_id!r}{where}",
            code="UNKNOWN_NODE",
            details={"node_id": node_id, "referenced_by": referenced_by}
        )
        self.node_id = node_id


class UnknownModeError(GraphDefinitionError):
    """Requested entry mode is not declared by the algorithm."""

    def __init__(self, mode_id: str, available: list[str] | None = None):
        super().__init__(
            f"Unknown mode {mode_id!r}",
            code="UNKNOWN_MODE",
            details={"mode_id": mode_id, "available": available or []}
        )
        self.mode_id = mode_id


class NoMatchingTransitionError(GraphDefinitionError):
    """Input node has neither an edge for the value nor a wildcard edge."""

    def __init__(self, node_id: str, value: str, message: str | None = None):
        super().__init__(
            message or f"Node {node_id!r} has no transition for value {value!r} and no wildcard",
            code="NO_MATCHING_TRANSITION",
            details={"node_id": node_id, "value": value}
        )
        self.node_id = node_id
        self.value = value


class TraversalLoopError(GraphDefinitionError):
    """Traversal failed to make progress: logic-node cycle or input-node revisit."""

    def __init__(self, message: str, path: list[str] | None = None):
        super().__init__(message, code="TRAVERSAL_LOOP", details={"path": path or []})
        self.path = path or []


# =============================================================================
# Session errors (recoverable)
# =============================================================================

class SessionError(DxGraphError):
    """Caller-side misuse of a traversal session."""

    def __init__(self, message: str, code: str = "SESSION_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, details=details)


class InvalidAnswerError(SessionError):
    """Value is not one of the current input node's declared options."""

    def __init__(self, node_id: str, value: str, allowed: list[str]):
        super().__init__(
            f"Invalid answer {value!r} for {node_id!r}; expected one of {allowed}",
            code="INVALID_ANSWER",
            details={"node_id": node_id, "value": value, "allowed": allowed}
        )
        self.node_id = node_id
        self.value = value
        self.allowed = allowed


class SessionTerminatedError(SessionError):
    """Interaction attempted on a session that already ended."""

    def __init__(self, session_id: str, status: str):
        super().__init__(
            f"Session {session_id} is {status}; no further answers accepted",
            code="SESSION_TERMINATED",
            details={"session_id": session_id, "status": status}
        )
        self.session_id = session_id


class SessionNotCompleteError(SessionError):
    """Outcome requested before the session reached a result node."""

    def __init__(self, session_id: str, status: str):
        super().__init__(
            f"Session {session_id} has no outcome (status: {status})",
            code="SESSION_NOT_COMPLETE",
            details={"session_id": session_id, "status": status}
        )
        self.session_id = session_id


class AnswerOverwriteError(SessionError):
    """An answer was already recorded for this node in the current session."""

    def __init__(self, node_id: str):
        super().__init__(
            f"Answer for {node_id!r} already recorded",
            code="ANSWER_OVERWRITE",
            details={"node_id": node_id}
        )
        self.node_id = node_id
