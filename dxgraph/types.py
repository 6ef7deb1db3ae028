"""
Core types for decision-graph traversal.

Graph definitions (nodes, modes, algorithms) are pydantic models so they can be
validated from plain dicts or JSON. Runtime types (sessions, questions, views)
are dataclasses owned by a single traversal session.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .answers import AnswerStore
from .rules import NodeId, DecisionRule, WILDCARD


class NodeKind(str, Enum):
    """Kinds of node in a decision graph."""
    INPUT = "input"     # suspends for an external answer
    LOGIC = "logic"     # auto-advances via a decision rule
    RESULT = "result"   # terminal


class SessionStatus(str, Enum):
    """Lifecycle of a traversal session."""
    ACTIVE = "active"
    COMPLETE = "complete"
    FAILED = "failed"


# =============================================================================
# Graph definition
# =============================================================================

class _Definition(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Option(_Definition):
    """An answer choice: stored value and display label."""
    value: str
    label: str


class InputNode(_Definition):
    id: NodeId
    kind: Literal["input"] = "input"
    prompt: str
    options: tuple[Option, ...]
    edges: Mapping[str, NodeId]  # option value (or "*") -> next node

    @field_validator("edges")
    @classmethod
    def freeze_edges(cls, edges: Mapping[str, NodeId]) -> Mapping[str, NodeId]:
        return MappingProxyType(dict(edges))

    @property
    def values(self) -> list[str]:
        return [o.value for o in self.options]

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD in self.edges


class LogicNode(_Definition):
    id: NodeId
    kind: Literal["logic"] = "logic"
    rule: DecisionRule
    note: str = ""  # free-text description for reviewers


class ResultNode(_Definition):
    id: NodeId
    kind: Literal["result"] = "result"
    result_key: str


Node = Annotated[Union[InputNode, LogicNode, ResultNode], Field(discriminator="kind")]


class Citation(_Definition):
    """Bibliographic source; opaque to the engine."""
    authors: str = ""
    title: str = ""
    journal: str = ""
    url: str = ""


class Mode(_Definition):
    """A named entry point into the graph."""
    id: str
    name: str
    description: str = ""
    start_node_id: NodeId


class Algorithm(_Definition):
    """Complete, language-neutral definition of one diagnostic algorithm."""
    id: str
    name: str
    description: str = ""
    citation: Citation = Field(default_factory=Citation)
    modes: tuple[Mode, ...]
    nodes: Mapping[NodeId, Node]
    aliases: Mapping[str, tuple[NodeId, ...]] = Field(default_factory=dict)
    outcome_labels: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("nodes", "aliases", "outcome_labels")
    @classmethod
    def freeze_mappings(cls, mapping: Mapping) -> Mapping:
        return MappingProxyType(dict(mapping))


# =============================================================================
# Runtime
# =============================================================================

@dataclass(frozen=True)
class Question:
    """What a UI collaborator needs to ask for the current input node."""
    node_id: NodeId
    prompt: str
    options: tuple[Option, ...]

    @property
    def values(self) -> list[str]:
        return [o.value for o in self.options]

    @classmethod
    def from_node(cls, node: InputNode) -> Question:
        return cls(node_id=node.id, prompt=node.prompt, options=tuple(node.options))


@dataclass
class Session:
    """
    Traversal runtime for one linear assessment.

    Owned by exactly one caller; the answer store and current-node pointer are
    never shared across sessions.
    """
    session_id: str
    algorithm_id: str
    mode_id: str
    current: NodeId
    answers: AnswerStore = field(default_factory=AnswerStore)
    status: SessionStatus = SessionStatus.ACTIVE
    path: list[NodeId] = field(default_factory=list)
    error: dict[str, Any] | None = None

    def __post_init__(self):
        """Ensure answers is always an AnswerStore."""
        if not isinstance(self.answers, AnswerStore):
            self.answers = AnswerStore(self.answers or {})


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of a session after a driver step."""
    session_id: str
    mode_id: str
    current: NodeId
    status: SessionStatus
    question: Question | None
    outcome: str | None
    answers: dict[str, str]
    path: list[NodeId]

    @property
    def is_terminal(self) -> bool:
        return self.status != SessionStatus.ACTIVE
