"""
Core interfaces and types for clinical decision-graph traversal.

This package provides the contracts and the engine that walk a diagnostic
algorithm encoded as a graph of input, logic and result nodes:

- NodeRegistry holds one validated algorithm graph (read-only, shared)
- Logic rules are data (majority vote, alias reuse, conditional, shortcut)
- Orchestrators (plain Python, Burr) expose the step-by-step session API
- Medical content lives under ``dxgraph.domains``

Version: 1.0.0
"""

DXGRAPH_API_VERSION = "1.0.0"

from .rules import (
    NodeId,
    WILDCARD,
    UNAVAILABLE,
    Tally,
    AnswerCondition,
    Case,
    Criterion,
    Threshold,
    VoteRule,
    RequiredParameter,
    MajorityVoteRule,
    AliasReuseRule,
    ConditionalRule,
    ShortcutRule,
    DecisionRule,
)

from .types import (
    NodeKind,
    SessionStatus,
    Option,
    InputNode,
    LogicNode,
    ResultNode,
    Node,
    Citation,
    Mode,
    Algorithm,
    Question,
    Session,
    SessionView,
)

from .errors import (
    DxGraphError,
    GraphDefinitionError,
    UnknownNodeError,
    UnknownModeError,
    NoMatchingTransitionError,
    TraversalLoopError,
    SessionError,
    InvalidAnswerError,
    SessionTerminatedError,
    SessionNotCompleteError,
    AnswerOverwriteError,
)

from .answers import AnswerStore
from .interfaces import NodeIndex, DecisionEvaluator, TraversalEngine
from .config import EngineConfig, get_config, set_config
from .registry import NodeRegistry, load_registry, load_registry_file
from .orchestrators import (
    BaseOrchestrator,
    BurrOrchestrator,
    create_traversal_engine,
    replay_answers,
)

__all__ = [
    "DXGRAPH_API_VERSION",
    # Rules
    "NodeId",
    "WILDCARD",
    "UNAVAILABLE",
    "Tally",
    "AnswerCondition",
    "Case",
    "Criterion",
    "Threshold",
    "VoteRule",
    "RequiredParameter",
    "MajorityVoteRule",
    "AliasReuseRule",
    "ConditionalRule",
    "ShortcutRule",
    "DecisionRule",
    # Types
    "NodeKind",
    "SessionStatus",
    "Option",
    "InputNode",
    "LogicNode",
    "ResultNode",
    "Node",
    "Citation",
    "Mode",
    "Algorithm",
    "Question",
    "Session",
    "SessionView",
    # Errors
    "DxGraphError",
    "GraphDefinitionError",
    "UnknownNodeError",
    "UnknownModeError",
    "NoMatchingTransitionError",
    "TraversalLoopError",
    "SessionError",
    "InvalidAnswerError",
    "SessionTerminatedError",
    "SessionNotCompleteError",
    "AnswerOverwriteError",
    # Interfaces
    "AnswerStore",
    "NodeIndex",
    "DecisionEvaluator",
    "TraversalEngine",
    # Configuration
    "EngineConfig",
    "get_config",
    "set_config",
    # Registry
    "NodeRegistry",
    "load_registry",
    "load_registry_file",
    # Orchestrators
    "BaseOrchestrator",
    "BurrOrchestrator",
    "create_traversal_engine",
    "replay_answers",
]
