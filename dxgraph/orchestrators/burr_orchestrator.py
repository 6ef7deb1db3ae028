"""
Burr Orchestrator Implementation

Same session contract as BaseOrchestrator, with each session backed by a Burr
``Application``. The state machine is:

    advance --(status == 'complete')--> finish
    advance --(otherwise)-------------> record_answer   (halts for input)
    record_answer --------------------> advance

Burr tracking can be enabled to inspect traversals in the Burr UI.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from typing import Any

from burr.core import Application, ApplicationBuilder, State, action, default, expr

from dxgraph import DXGRAPH_API_VERSION
from ..answers import AnswerStore
from ..config import EngineConfig, get_config
from ..engines.stepping import advance, apply_answer, check_answer
from ..errors import GraphDefinitionError, SessionNotCompleteError, SessionTerminatedError
from ..interfaces import NodeIndex
from ..rules import NodeId
from ..types import InputNode, Question, ResultNode, Session, SessionStatus, SessionView
from ..utils.logging import get_logger

logger = get_logger(__name__)


# =================================================================================
# Burr actions
# =================================================================================

@action(reads=["current", "answers", "path"], writes=["current", "path", "status"])
def advance_chain(state: State, registry: NodeIndex, max_chain: int) -> State:
    reached, visited = advance(registry, state["current"], state["answers"], max_chain)
    complete = isinstance(registry.lookup(reached), ResultNode)
    return state.update(
        current=reached,
        path=list(state["path"]) + [str(v) for v in visited],
        status=(SessionStatus.COMPLETE if complete else SessionStatus.ACTIVE).value,
    )

@action(reads=["current", "answers"], writes=["current", "answers"])
def record_answer(state: State, registry: NodeIndex, value: str) -> State:
    node = registry.lookup(state["current"])
    target = apply_answer(registry, node, value)
    answers = dict(state["answers"])
    answers[node.id] = value
    return state.update(current=target, answers=answers)

@action(reads=["current"], writes=["outcome"])
def finish(state: State, registry: NodeIndex) -> State:
    return state.update(outcome=registry.lookup(state["current"]).result_key)


def build_app(
    registry: NodeIndex,
    start_node: NodeId,
    *,
    app_id: str,
    max_chain: int,
    tracking: bool = False,
    project: str = "dxgraph",
) -> Application:
    builder = ApplicationBuilder()
    if tracking:
        from burr.tracking.client import LocalTrackingClient
        builder = builder.with_tracker(LocalTrackingClient(project=project), use_otel_tracing=False)

    return (
        builder
        .with_actions(
            advance=advance_chain.bind(registry=registry, max_chain=max_chain),
            record_answer=record_answer.bind(registry=registry),
            finish=finish.bind(registry=registry),
        )
        .with_transitions(
            ("advance", "finish", expr("status == 'complete'")),
            ("advance", "record_answer", default),
            ("record_answer", "advance"),
        )
        .with_state(
            current=str(start_node),
            answers={},
            path=[],
            status=SessionStatus.ACTIVE.value,
            outcome=None,
        )
        .with_entrypoint("advance")
        .with_identifiers(app_id=app_id)
        .build()
    )


# =================================================================================
# Orchestrator
# =================================================================================

@dataclass
class BurrSession(Session):
    """Session whose state lives in a Burr application; fields mirror its state."""
    app: Any = field(default=None, repr=False)


class BurrOrchestrator:
    """Traversal driver backed by Burr state machines, one application per session."""

    implements_api_version = DXGRAPH_API_VERSION

    def __init__(
        self,
        registry: NodeIndex,
        config: EngineConfig | None = None,
        *,
        tracking: bool | None = None,
        project: str | None = None,
    ):
        self.registry = registry
        self.config = config or get_config()
        self.config.validate()
        self.tracking = self.config.burr_tracking if tracking is None else tracking
        self.project = project or self.config.burr_project

    def start(self, mode_id: str) -> BurrSession:
        mode = self.registry.mode(mode_id)
        session_id = uuid.uuid4().hex
        session = BurrSession(
            session_id=session_id,
            algorithm_id=self.registry.algorithm.id,
            mode_id=mode.id,
            current=mode.start_node_id,
            app=self._build(mode.start_node_id, session_id),
        )
        logger.debug("Burr session %s started: %s/%s", session_id, session.algorithm_id, mode.id)
        self._run(session)
        return session

    def answer(self, session: BurrSession, value: str) -> SessionView:
        if session.status != SessionStatus.ACTIVE:
            raise SessionTerminatedError(session.session_id, session.status.value)
        # Invalid answers never reach the application
        check_answer(self.registry.lookup(session.current), value)
        try:
            session.app.step(inputs={"value": value})
        except GraphDefinitionError as e:
            self._fail(session, e)
            raise
        self._run(session)
        return self.view(session)

    def current_question(self, session: BurrSession) -> Question | None:
        if session.status != SessionStatus.ACTIVE:
            return None
        node = self.registry.lookup(session.current)
        return Question.from_node(node) if isinstance(node, InputNode) else None

    def is_terminal(self, session: BurrSession) -> bool:
        return session.status != SessionStatus.ACTIVE

    def outcome(self, session: BurrSession) -> str:
        if session.status != SessionStatus.COMPLETE:
            raise SessionNotCompleteError(session.session_id, session.status.value)
        return session.app.state["outcome"]

    def view(self, session: BurrSession) -> SessionView:
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

    def reset(self, session: BurrSession) -> SessionView:
        start = self.registry.mode(session.mode_id).start_node_id
        session.app = self._build(start, session.session_id)
        session.status = SessionStatus.ACTIVE
        session.error = None
        self._run(session)
        return self.view(session)

    # ---- internals ----
    def _build(self, start: NodeId, session_id: str) -> Application:
        return build_app(
            self.registry,
            start,
            app_id=session_id,
            max_chain=self.config.max_logic_chain,
            tracking=self.tracking,
            project=self.project,
        )

    def _run(self, session: BurrSession) -> None:
        """Run until the next input is needed or the result is recorded."""
        try:
            session.app.run(halt_before=["record_answer"], halt_after=["finish"])
        except GraphDefinitionError as e:
            self._fail(session, e)
            raise
        self._sync(session)
        if session.status == SessionStatus.COMPLETE:
            logger.info("Burr session %s complete: %s", session.session_id, self.outcome(session))

    def _sync(self, session: BurrSession) -> None:
        state = session.app.state
        session.current = NodeId(state["current"])
        session.answers = AnswerStore(state["answers"])
        session.path = [NodeId(p) for p in state["path"]]
        session.status = SessionStatus(state["status"])

    def _fail(self, session: BurrSession, error: GraphDefinitionError) -> None:
        self._sync(session)
        session.status = SessionStatus.FAILED
        session.error = error.to_dict()
        logger.warning("Burr session %s failed at %s: %s", session.session_id, session.current, error.message)
