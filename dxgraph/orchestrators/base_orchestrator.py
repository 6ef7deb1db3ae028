"""
Base Orchestrator Implementation

Plain-Python traversal driver. It holds no per-session state of its own: every
session carries its answers, current node and status, so any number of
sessions can run against one shared registry.
"""

from __future__ import annotations
import uuid
from collections.abc import Iterable
from typing import Any

from dxgraph import DXGRAPH_API_VERSION
from ..answers import AnswerStore
from ..config import EngineConfig, get_config
from ..engines.stepping import advance, apply_answer
from ..errors import (
    GraphDefinitionError, SessionError, SessionNotCompleteError, SessionTerminatedError,
)
from ..interfaces import NodeIndex, TraversalEngine
from ..rules import NodeId
from ..types import InputNode, Question, ResultNode, Session, SessionStatus, SessionView
from ..utils.logging import get_logger

logger = get_logger(__name__)


class BaseOrchestrator:
    """
    Step-by-step session driver.

    Input nodes suspend for ``answer()``; chains of logic nodes are followed in a
    single step; reaching a result node completes the session.
    """

    implements_api_version = DXGRAPH_API_VERSION

    def __init__(self, registry: NodeIndex, config: EngineConfig | None = None):
        self.registry = registry
        self.config = config or get_config()
        self.config.validate()

    # ---- session API ----
    def start(self, mode_id: str) -> Session:
        """Start a new session at a mode's entry node."""
        mode = self.registry.mode(mode_id)
        session = Session(
            session_id=uuid.uuid4().hex,
            algorithm_id=self.registry.algorithm.id,
            mode_id=mode.id,
            current=mode.start_node_id,
        )
        logger.debug("Session %s started: %s/%s", session.session_id, session.algorithm_id, mode.id)
        self._settle(session, mode.start_node_id)
        return session

    def answer(self, session: Session, value: str) -> SessionView:
        """Record an answer for the current input node and advance."""
        self._require_active(session)
        node = self.registry.lookup(session.current)
        try:
            # InvalidAnswerError leaves the session untouched
            target = apply_answer(self.registry, node, value)
        except GraphDefinitionError as e:
            self._fail(session, e)
            raise
        session.answers.record(node.id, value)
        logger.debug("Session %s: %s = %s", session.session_id, node.id, value)
        self._settle(session, target)
        return self.view(session)

    def current_question(self, session: Session) -> Question | None:
        if session.status != SessionStatus.ACTIVE:
            return None
        node = self.registry.lookup(session.current)
        return Question.from_node(node) if isinstance(node, InputNode) else None

    def is_terminal(self, session: Session) -> bool:
        return session.status != SessionStatus.ACTIVE

    def outcome(self, session: Session) -> str:
        if session.status != SessionStatus.COMPLETE:
            raise SessionNotCompleteError(session.session_id, session.status.value)
        return self.registry.lookup(session.current).result_key

    def view(self, session: Session) -> SessionView:
        return SessionView(
            session_id=session.session_id,
            mode_id=session.mode_id,
            current=session.current,
            status=session.status,
            question=self.current_question(session),
            outcome=self.outcome(session) if session.status == SessionStatus.COMPLETE else None,
            answers=session.answers.snapshot(),
            path=list(session.path),
        )

    def reset(self, session: Session) -> SessionView:
        """Discard answers and restart at the mode's entry node."""
        start = self.registry.mode(session.mode_id).start_node_id
        session.answers.clear()
        session.path.clear()
        session.status = SessionStatus.ACTIVE
        session.error = None
        session.current = start
        self._settle(session, start)
        return self.view(session)

    # ---- persistence boundary ----
    def dump_session(self, session: Session) -> dict[str, Any]:
        """Serialize a Session to a JSON-compatible dict."""
        return {
            "session_id": session.session_id,
            "algorithm_id": session.algorithm_id,
            "mode_id": session.mode_id,
            "current": str(session.current),
            "answers": session.answers.snapshot(),
            "status": session.status.value,
            "path": [str(p) for p in session.path],
            "error": session.error,
        }

    def load_session(self, d: dict[str, Any]) -> Session:
        """
        Deserialize a Session; its mode and current node must exist in this registry.

        A complete session must rest on a result node and an active one on an input node.
        """
        self.registry.mode(d["mode_id"])
        node = self.registry.lookup(NodeId(d["current"]))
        status = SessionStatus(d.get("status", SessionStatus.ACTIVE.value))
        expected = {SessionStatus.COMPLETE: ResultNode, SessionStatus.ACTIVE: InputNode}.get(status)
        if expected is not None and not isinstance(node, expected):
            raise SessionError(
                f"Session {d['session_id']!r} is {status.value} but rests on {node.kind} node {node.id!r}",
                code="INCONSISTENT_SESSION",
                details={"session_id": d["session_id"], "status": status.value, "current": node.id},
            )
        return Session(
            session_id=d["session_id"],
            algorithm_id=d.get("algorithm_id", self.registry.algorithm.id),
            mode_id=d["mode_id"],
            current=node.id,
            answers=AnswerStore(d.get("answers", {})),
            status=status,
            path=[NodeId(p) for p in d.get("path", [])],
            error=d.get("error"),
        )

    # ---- internals ----
    def _settle(self, session: Session, node_id: NodeId) -> None:
        """Move to ``node_id`` and follow logic nodes until input or result."""
        try:
            reached, visited = advance(self.registry, node_id, session.answers, self.config.max_logic_chain)
        except GraphDefinitionError as e:
            self._fail(session, e)
            raise
        session.path.extend(visited)
        session.current = reached
        if isinstance(self.registry.lookup(reached), ResultNode):
            session.status = SessionStatus.COMPLETE
            logger.info("Session %s complete: %s", session.session_id, self.outcome(session))

    def _require_active(self, session: Session) -> None:
        if session.status != SessionStatus.ACTIVE:
            raise SessionTerminatedError(session.session_id, session.status.value)

    def _fail(self, session: Session, error: GraphDefinitionError) -> None:
        session.status = SessionStatus.FAILED
        session.error = error.to_dict()
        logger.warning("Session %s failed at %s: %s", session.session_id, session.current, error.message)


def replay_answers(engine: TraversalEngine, mode_id: str, values: Iterable[str]) -> Session:
    """Drive a fresh session through a fixed answer sequence."""
    session = engine.start(mode_id)
    for value in values:
        engine.answer(session, value)
    return session
