"""
Test Suite for Orchestrator Implementations

Runs the same session contract against both drivers (plain Python and Burr):
- Session start, answering and auto-advance through logic nodes
- Invalid answers, terminal idempotence and outcome access
- Loop guards and failure isolation between sessions
- Determinism, reset and session persistence
"""

import json

import pytest

from dxgraph import (
    DXGRAPH_API_VERSION, BaseOrchestrator, BurrOrchestrator, InvalidAnswerError, SessionError,
    SessionNotCompleteError, SessionStatus, SessionTerminatedError, TraversalLoopError,
    create_traversal_engine, load_registry, replay_answers,
)
from dxgraph.domains.echo import create_mayo2025_registry, get_algorithm

ALL_NORMAL = ["normal", "normal", "normal", "normal", "greater"]


@pytest.fixture(scope="module")
def mayo():
    """Create Mayo 2025 registry for tests."""
    return create_mayo2025_registry()


@pytest.fixture(params=["base", "burr"])
def engine(request, mayo):
    """Create each engine kind over the Mayo registry."""
    return create_traversal_engine(mayo, request.param)


@pytest.fixture(scope="module")
def looping():
    """Registry whose logic routes back to an already-answered question unless told to stop."""
    return load_registry({
        "id": "looping",
        "name": "Looping",
        "modes": [
            {"id": "revisit", "name": "Revisit", "start_node_id": "q1"},
            {"id": "cycle", "name": "Cycle", "start_node_id": "q2"},
        ],
        "nodes": {
            "q1": {
                "id": "q1",
                "kind": "input",
                "prompt": "Stop?",
                "options": [{"value": "stop", "label": "Stop"}, {"value": "again", "label": "Again"}],
                "edges": {"*": "check"},
            },
            "check": {
                "id": "check",
                "kind": "logic",
                "rule": {
                    "kind": "conditional",
                    "cases": [{"target": "done", "all_of": [{"parameter": "q1", "values": ["stop"]}]}],
                    "otherwise": "q1",
                },
            },
            "q2": {
                "id": "q2",
                "kind": "input",
                "prompt": "Go?",
                "options": [{"value": "go", "label": "Go"}, {"value": "done", "label": "Done"}],
                "edges": {"go": "ping", "done": "done"},
            },
            "ping": {"id": "ping", "kind": "logic",
                     "rule": {"kind": "conditional", "cases": [], "otherwise": "pong"}},
            "pong": {"id": "pong", "kind": "logic",
                     "rule": {"kind": "conditional", "cases": [], "otherwise": "ping"}},
            "done": {"id": "done", "kind": "result", "result_key": "done"},
        },
    })


@pytest.fixture(params=["base", "burr"])
def looping_engine(request, looping):
    """Create each engine kind over the looping registry."""
    return create_traversal_engine(looping, request.param)


class TestSessionBasics:
    """Test starting and stepping a session."""

    def test_start(self, engine):
        """Test that a new session suspends on the first question."""
        session = engine.start("standard")

        assert session.status == SessionStatus.ACTIVE
        assert session.current == "initialDataCollection"
        assert session.path == ["initialDataCollection"]
        assert not engine.is_terminal(session)

        question = engine.current_question(session)
        assert question.node_id == "initialDataCollection"
        assert question.values == ["normal", "abnormal", "unavailable"]

    def test_answer_advances(self, engine):
        """Test that an answer is recorded and the next question is returned."""
        session = engine.start("standard")
        view = engine.answer(session, "abnormal")

        assert view.current == "eToERatio"
        assert view.answers == {"initialDataCollection": "abnormal"}
        assert view.question.prompt == "What is the E/e' ratio?"
        assert not view.is_terminal

    def test_logic_nodes_auto_advance(self, engine):
        """Test that the evaluator node is passed through in one step."""
        session = replay_answers(engine, "standard", ["abnormal", "abnormal", "abnormal", "normal"])

        assert session.current == "elevatedFillingPressure"
        assert "criteriaEvaluate" in session.path
        assert engine.current_question(session).values == ["greater_equal", "less"]

    def test_complete(self, engine):
        """Test reaching a result node."""
        session = replay_answers(engine, "standard", ALL_NORMAL)
        view = engine.view(session)

        assert engine.is_terminal(session)
        assert view.status == SessionStatus.COMPLETE
        assert view.outcome == "normal"
        assert view.question is None
        assert view.path == [
            "initialDataCollection", "eToERatio", "trVelocity", "laVolume",
            "criteriaEvaluate", "normalFillingPressure", "resultNormal",
        ]

    def test_api_version(self, engine):
        """Test that engines declare the API version they implement."""
        assert engine.implements_api_version == DXGRAPH_API_VERSION

    def test_unknown_engine_kind(self, mayo):
        """Test the factory rejects unknown engine kinds."""
        with pytest.raises(ValueError):
            create_traversal_engine(mayo, "celery")

    def test_factory_types(self, mayo):
        """Test the factory returns the requested implementation."""
        assert isinstance(create_traversal_engine(mayo, "base"), BaseOrchestrator)
        assert isinstance(create_traversal_engine(mayo, "burr"), BurrOrchestrator)


class TestAnswerValidation:
    """Test invalid answers and terminal sessions."""

    def test_invalid_answer_leaves_session_unchanged(self, engine):
        """Test that a value outside the options is rejected without side effects."""
        session = engine.start("standard")
        engine.answer(session, "normal")
        before = engine.view(session)

        with pytest.raises(InvalidAnswerError) as exc_info:
            engine.answer(session, "borderline")

        assert exc_info.value.allowed == ["abnormal", "normal", "unavailable"]
        assert engine.view(session) == before
        # The session is still usable
        engine.answer(session, "normal")
        assert session.current == "trVelocity"

    def test_terminal_session_rejects_answers(self, engine):
        """Test that a completed session accepts no further answers."""
        session = replay_answers(engine, "standard", ALL_NORMAL)
        before = engine.view(session)

        with pytest.raises(SessionTerminatedError):
            engine.answer(session, "normal")

        assert engine.view(session) == before
        assert before.answers == {
            "initialDataCollection": "normal", "eToERatio": "normal", "trVelocity": "normal",
            "laVolume": "normal", "normalFillingPressure": "greater",
        }

    def test_terminal_queries_are_idempotent(self, engine):
        """Test that repeated queries on a finished session return the same data."""
        session = replay_answers(engine, "standard", ALL_NORMAL)

        assert engine.outcome(session) == engine.outcome(session) == "normal"
        assert engine.view(session) == engine.view(session)
        assert engine.current_question(session) is None

    def test_outcome_before_completion(self, engine):
        """Test that an active session has no outcome."""
        session = engine.start("standard")

        with pytest.raises(SessionNotCompleteError):
            engine.outcome(session)
        assert engine.view(session).outcome is None


class TestLoopGuards:
    """Test traversal loop detection and failure isolation."""

    def test_revisited_input_fails_session(self, looping_engine):
        """Test that routing back to an answered question fails the session."""
        session = looping_engine.start("revisit")

        with pytest.raises(TraversalLoopError):
            looping_engine.answer(session, "again")

        assert session.status == SessionStatus.FAILED
        assert session.error["error"] == "TRAVERSAL_LOOP"
        assert looping_engine.is_terminal(session)
        before = looping_engine.view(session)
        error = dict(session.error)

        with pytest.raises(SessionTerminatedError):
            looping_engine.answer(session, "stop")

        assert looping_engine.view(session) == before
        assert before.answers == {"q1": "again"}
        assert session.error == error

    def test_logic_cycle_fails_session(self, looping_engine):
        """Test that a logic-only cycle is cut off by the chain limit."""
        session = looping_engine.start("cycle")

        with pytest.raises(TraversalLoopError):
            looping_engine.answer(session, "go")

        assert session.status == SessionStatus.FAILED

    def test_failure_is_isolated(self, looping_engine):
        """Test that one failed session does not affect another."""
        failed = looping_engine.start("revisit")
        healthy = looping_engine.start("revisit")

        with pytest.raises(TraversalLoopError):
            looping_engine.answer(failed, "again")
        looping_engine.answer(healthy, "stop")

        assert failed.status == SessionStatus.FAILED
        assert healthy.status == SessionStatus.COMPLETE
        assert looping_engine.outcome(healthy) == "done"


class TestDeterminism:
    """Test that identical answers yield identical traversals."""

    def test_replay_is_deterministic(self, engine):
        """Test that replaying the same answers gives the same route and outcome."""
        answers = ["abnormal", "unavailable", "abnormal", "normal"]
        first = replay_answers(engine, "standard", answers)
        second = replay_answers(engine, "standard", answers)

        assert first.session_id != second.session_id
        assert first.path == second.path
        assert first.current == second.current

    def test_engines_agree(self, mayo):
        """Test that both engines take the same route."""
        answers = ["normal", "abnormal", "abnormal", "unavailable", "less"]
        base = create_traversal_engine(mayo, "base")
        burr = create_traversal_engine(mayo, "burr")

        base_session = replay_answers(base, "standard", answers)
        burr_session = replay_answers(burr, "standard", answers)

        assert base_session.path == burr_session.path
        assert base.outcome(base_session) == burr.outcome(burr_session) == "grade-2"

    def test_engines_agree_on_reused_answers(self):
        """Test that both engines skip questions already answered on the normal-LVEF path."""
        ase = get_algorithm("ase2016")
        answers = ["normal", "positive", "positive", "positive", "negative", "mid_range"]
        expected = [
            "initialAssessment", "normalPath_EeRatio", "normalPath_EPrime", "normalPath_TRVelocity",
            "normalPath_LAVolume", "normalPath_Evaluate", "reducedPath_MitralInflow",
            "reducedPath_CheckParameterAvailability", "reducedPath_Evaluate", "resultGrade2",
        ]

        for kind in ["base", "burr"]:
            engine = create_traversal_engine(ase, kind)
            first = replay_answers(engine, "integrated", answers)
            second = replay_answers(engine, "integrated", answers)

            assert first.path == second.path == expected
            assert engine.outcome(first) == engine.outcome(second) == "grade-2"
            assert "reducedPath_EeRatio" not in first.answers

    def test_sessions_are_independent(self, engine):
        """Test that concurrent sessions keep separate answers."""
        first = engine.start("standard")
        second = engine.start("standard")
        engine.answer(first, "normal")
        engine.answer(second, "abnormal")

        assert first.answers["initialDataCollection"] == "normal"
        assert second.answers["initialDataCollection"] == "abnormal"


class TestReset:
    """Test resetting a session."""

    def test_reset_restarts(self, engine):
        """Test that reset discards answers and returns to the entry node."""
        session = engine.start("standard")
        engine.answer(session, "normal")
        engine.answer(session, "normal")

        view = engine.reset(session)

        assert view.current == "initialDataCollection"
        assert view.answers == {}
        assert view.path == ["initialDataCollection"]
        assert view.status == SessionStatus.ACTIVE

    def test_reset_completed_session(self, engine):
        """Test that a finished session can be run again after reset."""
        session = replay_answers(engine, "standard", ALL_NORMAL)
        engine.reset(session)

        for value in ["abnormal", "abnormal", "abnormal", "abnormal", "greater_equal"]:
            engine.answer(session, value)

        assert engine.outcome(session) == "grade-3"


class TestPersistence:
    """Test dump/load of sessions (plain orchestrator)."""

    def test_dump_and_resume(self, mayo):
        """Test that a serialized session resumes where it left off."""
        engine = BaseOrchestrator(mayo)
        session = replay_answers(engine, "standard", ["normal", "normal"])

        data = json.loads(json.dumps(engine.dump_session(session)))
        assert data["current"] == "trVelocity"
        assert data["answers"] == {"initialDataCollection": "normal", "eToERatio": "normal"}

        restored = engine.load_session(data)
        for value in ["normal", "abnormal", "less_equal"]:
            engine.answer(restored, value)

        assert engine.outcome(restored) == "grade-1"
        assert restored.session_id == session.session_id

    def test_dump_failed_session(self, looping):
        """Test that a failure record survives serialization."""
        engine = BaseOrchestrator(looping)
        session = engine.start("revisit")
        with pytest.raises(TraversalLoopError):
            engine.answer(session, "again")

        restored = engine.load_session(engine.dump_session(session))

        assert restored.status == SessionStatus.FAILED
        assert restored.error["error"] == "TRAVERSAL_LOOP"

    @pytest.mark.parametrize("status, current", [
        ("complete", "trVelocity"),
        ("complete", "criteriaEvaluate"),
        ("active", "resultNormal"),
    ])
    def test_load_rejects_inconsistent_status(self, mayo, status, current):
        """Test that a loaded status must agree with the kind of its current node."""
        engine = BaseOrchestrator(mayo)
        data = engine.dump_session(replay_answers(engine, "standard", ["normal", "normal"]))
        data.update(status=status, current=current)

        with pytest.raises(SessionError, match="rests on") as exc_info:
            engine.load_session(data)

        assert exc_info.value.code == "INCONSISTENT_SESSION"
        assert exc_info.value.details["current"] == current

    def test_load_completed_session(self, mayo):
        """Test that a finished session reloads with its outcome."""
        engine = BaseOrchestrator(mayo)
        restored = engine.load_session(engine.dump_session(replay_answers(engine, "standard", ALL_NORMAL)))

        assert restored.status == SessionStatus.COMPLETE
        assert engine.outcome(restored) == "normal"
