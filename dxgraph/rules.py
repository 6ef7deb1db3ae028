"""
Decision rules carried by logic nodes.

Logic-node decisions are stored as data, not closures: each rule is one member
of a tagged union discriminated by ``kind``. The Logic Evaluator
(``dxgraph.engines.evaluators``) dispatches on the kind. Every rule can list
the node identifiers it may route to, so the registry can check them at load time.

Parameters are logical names resolved through the algorithm's alias map; a name
that is not in the map is taken as a node identifier.
"""

from __future__ import annotations
from enum import Enum
from typing import Annotated, Literal, NewType, Union

from pydantic import BaseModel, ConfigDict, Field

NodeId = NewType('NodeId', str)

WILDCARD = "*"
UNAVAILABLE = "unavailable"


class Tally(str, Enum):
    """Counters produced by a majority vote."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True, extra="forbid")


# =============================================================================
# Building blocks
# =============================================================================

class AnswerCondition(_Frozen):
    """True when the parameter's resolved answer is one of ``values``."""
    parameter: str
    values: tuple[str, ...]
    match_missing: bool = False  # also true when nothing was recorded


class Case(_Frozen):
    """Route to ``target`` when every ``all_of`` and at least one ``any_of`` condition holds."""
    target: NodeId
    all_of: tuple[AnswerCondition, ...] = ()
    any_of: tuple[AnswerCondition, ...] = ()

    def parameters(self) -> list[str]:
        return [c.parameter for c in [*self.all_of, *self.any_of]]


class Criterion(_Frozen):
    """
    One parameter counted by a majority vote.

    ``negative=None`` counts any available value that is not positive as negative.
    Missing answers count as unavailable.
    """
    parameter: str
    positive: tuple[str, ...]
    negative: tuple[str, ...] | None = None
    unavailable: tuple[str, ...] = (UNAVAILABLE,)


class Threshold(_Frozen):
    """Compare a tally against ``count + per_available * available``."""
    tally: Tally
    op: Literal[">", ">=", "==", "<", "<="]
    count: float = 0
    per_available: float = 0


class VoteRule(_Frozen):
    """Route to ``target`` when all thresholds hold."""
    target: NodeId
    when: tuple[Threshold, ...]


class RequiredParameter(_Frozen):
    """A parameter that must be known, and the input node that asks for it."""
    parameter: str
    ask: NodeId
    unavailable: tuple[str, ...] = (UNAVAILABLE,)


# =============================================================================
# Rule kinds
# =============================================================================

class MajorityVoteRule(_Frozen):
    """Count positive / negative / unavailable criteria and apply ordered thresholds."""
    kind: Literal["majority_vote"] = "majority_vote"
    criteria: tuple[Criterion, ...]
    rules: tuple[VoteRule, ...]
    otherwise: NodeId

    def targets(self) -> list[NodeId]:
        return [r.target for r in self.rules] + [self.otherwise]

    def parameters(self) -> list[str]:
        return [c.parameter for c in self.criteria]


class AliasReuseRule(_Frozen):
    """Reuse answers recorded on another path; route to the first parameter still missing."""
    kind: Literal["alias_reuse"] = "alias_reuse"
    required: tuple[RequiredParameter, ...]
    then: NodeId

    def targets(self) -> list[NodeId]:
        return [p.ask for p in self.required] + [self.then]

    def parameters(self) -> list[str]:
        return [p.parameter for p in self.required]


class ConditionalRule(_Frozen):
    """First matching case wins."""
    kind: Literal["conditional"] = "conditional"
    cases: tuple[Case, ...]
    otherwise: NodeId

    def targets(self) -> list[NodeId]:
        return [c.target for c in self.cases] + [self.otherwise]

    def parameters(self) -> list[str]:
        return [p for c in self.cases for p in c.parameters()]


class ShortcutRule(_Frozen):
    """Direct-outcome cases checked before the nested rule is consulted."""
    kind: Literal["shortcut"] = "shortcut"
    shortcuts: tuple[Case, ...]
    then: DecisionRule

    def targets(self) -> list[NodeId]:
        return [c.target for c in self.shortcuts] + self.then.targets()

    def parameters(self) -> list[str]:
        return [p for c in self.shortcuts for p in c.parameters()] + self.then.parameters()


DecisionRule = Annotated[
    Union[MajorityVoteRule, AliasReuseRule, ConditionalRule, ShortcutRule],
    Field(discriminator="kind"),
]

ShortcutRule.model_rebuild()


def iter_criteria(rule: DecisionRule) -> list[Criterion]:
    """All majority-vote criteria inside a rule, including nested ones."""
    if isinstance(rule, MajorityVoteRule):
        return list(rule.criteria)
    if isinstance(rule, ShortcutRule):
        return iter_criteria(rule.then)
    return []
