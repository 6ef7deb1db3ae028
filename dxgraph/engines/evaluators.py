"""
Logic Evaluator: picks the next node for a logic node from the full answer store.

Every rule kind is a pure function of (rule, answers, aliases). No I/O, clock or
randomness is consulted, so replaying the same answers always yields the same
route. Parameters resolve through the alias map by first match; the most
specific source is listed first.
"""

from __future__ import annotations
import operator
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Callable

from ..errors import GraphDefinitionError
from ..rules import (
    NodeId, Tally, AnswerCondition, Case, Criterion, Threshold,
    MajorityVoteRule, AliasReuseRule, ConditionalRule, ShortcutRule, DecisionRule,
)
from ..types import LogicNode
from ..utils.logging import get_logger

logger = get_logger(__name__)

AliasMap = Mapping[str, Sequence[str]]

_OPS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "==": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
}


def parameter_sources(parameter: str, aliases: AliasMap) -> list[str]:
    """Candidate node identifiers for a logical parameter, most specific first."""
    return list(aliases.get(parameter, [parameter]))


def resolve_parameter(parameter: str, answers: Mapping[str, str], aliases: AliasMap) -> str | None:
    """Value of the first populated source for ``parameter``, or None."""
    for node_id in parameter_sources(parameter, aliases):
        if node_id in answers:
            return answers[node_id]
    return None


# =============================================================================
# Majority vote
# =============================================================================

@dataclass(frozen=True)
class VoteTally:
    """Counts of classified criteria."""
    positive: int = 0
    negative: int = 0
    unavailable: int = 0

    @property
    def available(self) -> int:
        return self.positive + self.negative

    def get(self, tally: Tally | str) -> int:
        return {
            Tally.POSITIVE: self.positive,
            Tally.NEGATIVE: self.negative,
            Tally.AVAILABLE: self.available,
            Tally.UNAVAILABLE: self.unavailable,
        }[Tally(tally)]


def classify(criterion: Criterion, value: str | None) -> Tally:
    """Classify one answer as positive, negative or unavailable."""
    if value is None or value in criterion.unavailable:
        return Tally.UNAVAILABLE
    if value in criterion.positive:
        return Tally.POSITIVE
    if criterion.negative is None or value in criterion.negative:
        return Tally.NEGATIVE
    raise GraphDefinitionError(
        f"Value {value!r} for parameter {criterion.parameter!r} is not classified by its criterion",
        details={"parameter": criterion.parameter, "value": value},
    )


def tally_criteria(criteria: Sequence[Criterion], answers: Mapping[str, str], aliases: AliasMap) -> VoteTally:
    counts = {Tally.POSITIVE: 0, Tally.NEGATIVE: 0, Tally.UNAVAILABLE: 0}
    for criterion in criteria:
        counts[classify(criterion, resolve_parameter(criterion.parameter, answers, aliases))] += 1
    return VoteTally(
        positive=counts[Tally.POSITIVE],
        negative=counts[Tally.NEGATIVE],
        unavailable=counts[Tally.UNAVAILABLE],
    )


def threshold_holds(threshold: Threshold, tally: VoteTally) -> bool:
    bound = threshold.count + threshold.per_available * tally.available
    return _OPS[threshold.op](tally.get(threshold.tally), bound)


def evaluate_majority_vote(rule: MajorityVoteRule, answers: Mapping[str, str], aliases: AliasMap) -> NodeId:
    tally = tally_criteria(rule.criteria, answers, aliases)
    for vote_rule in rule.rules:
        if all(threshold_holds(t, tally) for t in vote_rule.when):
            logger.debug("Majority vote %s -> %s", tally, vote_rule.target)
            return vote_rule.target
    logger.debug("Majority vote %s -> %s (otherwise)", tally, rule.otherwise)
    return rule.otherwise


# =============================================================================
# Alias reuse
# =============================================================================

def evaluate_alias_reuse(rule: AliasReuseRule, answers: Mapping[str, str], aliases: AliasMap) -> NodeId:
    for required in rule.required:
        value = resolve_parameter(required.parameter, answers, aliases)
        if value is None or value in required.unavailable:
            return required.ask
    return rule.then


# =============================================================================
# Conditional / shortcut
# =============================================================================

def condition_holds(condition: AnswerCondition, answers: Mapping[str, str], aliases: AliasMap) -> bool:
    value = resolve_parameter(condition.parameter, answers, aliases)
    if value is None:
        return condition.match_missing
    return value in condition.values


def case_holds(case: Case, answers: Mapping[str, str], aliases: AliasMap) -> bool:
    if not all(condition_holds(c, answers, aliases) for c in case.all_of):
        return False
    if case.any_of and not any(condition_holds(c, answers, aliases) for c in case.any_of):
        return False
    return True


def evaluate_conditional(rule: ConditionalRule, answers: Mapping[str, str], aliases: AliasMap) -> NodeId:
    for case in rule.cases:
        if case_holds(case, answers, aliases):
            return case.target
    return rule.otherwise


def evaluate_shortcut(rule: ShortcutRule, answers: Mapping[str, str], aliases: AliasMap) -> NodeId:
    # Shortcuts short-circuit the nested rule entirely
    for case in rule.shortcuts:
        if case_holds(case, answers, aliases):
            logger.debug("Shortcut -> %s", case.target)
            return case.target
    return evaluate_rule(rule.then, answers, aliases)


_DISPATCH: dict[type, Callable[..., NodeId]] = {
    MajorityVoteRule: evaluate_majority_vote,
    AliasReuseRule: evaluate_alias_reuse,
    ConditionalRule: evaluate_conditional,
    ShortcutRule: evaluate_shortcut,
}


def evaluate_rule(rule: DecisionRule, answers: Mapping[str, str], aliases: AliasMap | None = None) -> NodeId:
    """Evaluate any decision rule against a snapshot of answers."""
    handler = _DISPATCH.get(type(rule))
    if handler is None:
        raise GraphDefinitionError(f"Unsupported decision rule: {type(rule).__name__}")
    return handler(rule, answers, aliases or {})


class LogicEvaluator:
    """
    Evaluates logic nodes for one algorithm.

    The alias map (logical parameter -> ordered candidate node identifiers) is
    fixed at construction so the reuse contract is visible at the interface.
    """

    def __init__(self, aliases: AliasMap | None = None):
        self.aliases: dict[str, tuple[str, ...]] = {k: tuple(v) for k, v in (aliases or {}).items()}

    def evaluate(self, node: LogicNode, answers: Mapping[str, str]) -> NodeId:
        """Return the next node identifier for ``node``."""
        target = evaluate_rule(node.rule, answers, self.aliases)
        logger.debug("Logic node %s -> %s", node.id, target)
        return target
