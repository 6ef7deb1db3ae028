"""
Decision Engines
================

Pure decision primitives used by the orchestrators:
- Transition Resolver: input node + answer -> next node
- Logic Evaluator: logic node + full answer store -> next node
- Stepping helpers that combine both with the node registry
"""

from .transitions import TransitionResolver, resolve
from .evaluators import (
    LogicEvaluator, VoteTally, classify, evaluate_rule, parameter_sources,
    resolve_parameter, tally_criteria,
)
from .stepping import advance, apply_answer, check_answer

__all__ = [
    "TransitionResolver",
    "resolve",
    "LogicEvaluator",
    "VoteTally",
    "classify",
    "evaluate_rule",
    "parameter_sources",
    "resolve_parameter",
    "tally_criteria",
    "advance",
    "apply_answer",
    "check_answer",
]
