"""
Node Registry
=============

Immutable mapping from node identifier to node definition for one algorithm,
validated once at load time. Any structural defect aborts construction, so a
session can never be started on a corrupt graph.

Also provides the outline view of a graph (anytree) used for display.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from anytree import Node as TreeNode, RenderTree

from .config import get_config
from .engines.evaluators import LogicEvaluator, classify, parameter_sources
from .engines.stepping import advance
from .engines.transitions import resolve
from .errors import (
    GraphDefinitionError, NoMatchingTransitionError, UnknownModeError, UnknownNodeError,
)
from .rules import NodeId, WILDCARD, iter_criteria
from .types import Algorithm, InputNode, LogicNode, Mode, Node, ResultNode
from .utils.logging import get_logger

logger = get_logger(__name__)


class NodeRegistry:
    """
    Validated, read-only node registry.

    Safe to share between any number of sessions; nothing in traversal writes
    to it.
    """

    def __init__(
        self,
        algorithm: Algorithm,
        *,
        exhaustive: bool | None = None,
        simulation_limit: int | None = None,
    ):
        self.algorithm = algorithm
        self._nodes: Mapping[NodeId, Node] = MappingProxyType(dict(algorithm.nodes))
        self._modes: Mapping[str, Mode] = MappingProxyType({m.id: m for m in algorithm.modes})
        self.aliases: Mapping[str, tuple[NodeId, ...]] = MappingProxyType(
            {name: tuple(sources) for name, sources in algorithm.aliases.items()}
        )
        self.evaluator = LogicEvaluator(self.aliases)

        cfg = get_config()
        self.validate(
            exhaustive=cfg.exhaustive_validation if exhaustive is None else exhaustive,
            simulation_limit=simulation_limit or cfg.simulation_limit,
        )

    # ---- identity ----
    @property
    def id(self) -> str:
        return self.algorithm.id

    @property
    def name(self) -> str:
        return self.algorithm.name

    @property
    def nodes(self) -> Mapping[NodeId, Node]:
        return self._nodes

    @property
    def modes(self) -> list[Mode]:
        return list(self._modes.values())

    # ---- lookup ----
    def lookup(self, node_id: NodeId, referenced_by: str | None = None) -> Node:
        """Get a node by its ID; raise UnknownNodeError if absent."""
        node = self._nodes.get(node_id)
        if node is None:
            raise UnknownNodeError(str(node_id), referenced_by)
        return node

    def get(self, node_id: NodeId) -> Node | None:
        """Get a node by its ID, or None if not found."""
        return self._nodes.get(node_id)

    def mode(self, mode_id: str) -> Mode:
        mode = self._modes.get(mode_id)
        if mode is None:
            raise UnknownModeError(mode_id, list(self._modes))
        return mode

    def result_nodes(self) -> list[ResultNode]:
        return [n for n in self._nodes.values() if isinstance(n, ResultNode)]

    def outcome_label(self, result_key: str) -> str:
        """Display text for a result key, falling back to the key itself."""
        return self.algorithm.outcome_labels.get(result_key, result_key)

    def successors(self, node_id: NodeId) -> list[NodeId]:
        """Every node id a node may route to, in declaration order."""
        node = self.lookup(node_id)
        if isinstance(node, InputNode):
            targets = list(node.edges.values())
        elif isinstance(node, LogicNode):
            targets = node.rule.targets()
        else:
            targets = []
        return list(dict.fromkeys(targets))

    def reachable_from(self, node_id: NodeId) -> set[NodeId]:
        """All node ids reachable from ``node_id`` (inclusive), ignoring answer data."""
        seen: set[NodeId] = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(t for t in self.successors(current) if t not in seen)
        return seen

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, exhaustive: bool = False, simulation_limit: int = 500000) -> None:
        """Run every structural check; raise on the first defect."""
        self._check_nodes()
        self._check_aliases()
        self._check_logic()
        self._check_modes()
        if exhaustive:
            for mode in self.modes:
                outcomes = self.simulate(mode.id, limit=simulation_limit)
                logger.info("Simulated %s/%s: %s", self.id, mode.id, dict(outcomes))

    def _check_nodes(self) -> None:
        for key, node in self._nodes.items():
            if key != node.id:
                raise GraphDefinitionError(
                    f"Node registered under {key!r} declares id {node.id!r}",
                    details={"key": key, "node_id": node.id},
                )
            if isinstance(node, InputNode):
                self._check_input(node)

    def _check_input(self, node: InputNode) -> None:
        values = node.values
        if not values:
            raise GraphDefinitionError(f"Input node {node.id!r} declares no options")
        if len(set(values)) != len(values):
            raise GraphDefinitionError(f"Input node {node.id!r} declares duplicate option values")

        for target in node.edges.values():
            self.lookup(target, referenced_by=node.id)

        specific = set(node.edges) - {WILDCARD}
        undeclared = specific - set(values)
        if undeclared:
            raise NoMatchingTransitionError(
                node.id, sorted(undeclared)[0],
                f"Input node {node.id!r} has edges for undeclared values {sorted(undeclared)}",
            )
        if not node.has_wildcard:
            uncovered = [v for v in values if v not in node.edges]
            if uncovered:
                raise NoMatchingTransitionError(
                    node.id, uncovered[0],
                    f"Input node {node.id!r} has no transition for options {uncovered} and no wildcard",
                )

    def _check_aliases(self) -> None:
        for name, sources in self.aliases.items():
            if not sources:
                raise GraphDefinitionError(f"Alias {name!r} lists no source nodes")
            for source in sources:
                if not isinstance(self.lookup(source, referenced_by=f"alias:{name}"), InputNode):
                    raise GraphDefinitionError(f"Alias {name!r} source {source!r} is not an input node")

    def _check_logic(self) -> None:
        for node in self._nodes.values():
            if not isinstance(node, LogicNode):
                continue
            for target in node.rule.targets():
                self.lookup(target, referenced_by=node.id)
            for parameter in node.rule.parameters():
                for source in parameter_sources(parameter, self.aliases):
                    if not isinstance(self.lookup(source, referenced_by=node.id), InputNode):
                        raise GraphDefinitionError(
                            f"Logic node {node.id!r} reads {source!r}, which is not an input node"
                        )
            for criterion in iter_criteria(node.rule):
                for source in parameter_sources(criterion.parameter, self.aliases):
                    for value in self.lookup(source).values:
                        try:
                            classify(criterion, value)
                        except GraphDefinitionError as e:
                            raise GraphDefinitionError(
                                f"Logic node {node.id!r}: option {value!r} of {source!r} "
                                f"is not classified for {criterion.parameter!r}",
                                details={"node_id": node.id, "source": source, "value": value},
                            ) from e

    def _check_modes(self) -> None:
        if not self._modes:
            raise GraphDefinitionError(f"Algorithm {self.id!r} declares no modes")
        if len(self._modes) != len(self.algorithm.modes):
            raise GraphDefinitionError(f"Algorithm {self.id!r} declares duplicate mode ids")

        reachable: set[NodeId] = set()
        for mode in self.modes:
            self.lookup(mode.start_node_id, referenced_by=f"mode:{mode.id}")
            from_start = self.reachable_from(mode.start_node_id)
            if not any(isinstance(self._nodes[n], ResultNode) for n in from_start):
                raise GraphDefinitionError(
                    f"Mode {mode.id!r} cannot reach any result node from {mode.start_node_id!r}"
                )
            reachable |= from_start

        orphans = sorted(set(self._nodes) - reachable)
        if orphans:
            logger.warning("Algorithm %s has nodes unreachable from every mode: %s", self.id, orphans)

    def simulate(self, mode_id: str, limit: int | None = None) -> Counter[str]:
        """
        Walk every combination of option values from a mode's start node.

        Returns:
            Count of answer paths ending on each result key.

        Raises:
            TraversalLoopError: a path cycles through logic nodes or revisits an input.
            GraphDefinitionError: more than ``limit`` states had to be explored.
        """
        cfg = get_config()
        limit = limit or cfg.simulation_limit
        outcomes: Counter[str] = Counter()
        explored = 0

        start, _ = advance(self, self.mode(mode_id).start_node_id, {}, cfg.max_logic_chain)
        stack: list[tuple[NodeId, dict[str, str]]] = [(start, {})]
        while stack:
            node_id, answers = stack.pop()
            explored += 1
            if explored > limit:
                raise GraphDefinitionError(
                    f"Simulation of {self.id}/{mode_id} exceeded {limit} states",
                    details={"limit": limit},
                )
            node = self._nodes[node_id]
            if isinstance(node, ResultNode):
                outcomes[node.result_key] += 1
                continue
            for value in node.values:
                branch = {**answers, node.id: value}
                target = resolve(node, value)
                reached, _ = advance(self, target, branch, cfg.max_logic_chain)
                stack.append((reached, branch))
        return outcomes

    # =========================================================================
    # Outline
    # =========================================================================

    def outline(self, mode_id: str) -> TreeNode:
        """Spanning tree of the graph from a mode's start node; re-converging nodes appear once."""
        start = self.mode(mode_id).start_node_id
        root = TreeNode(start, kind=self._nodes[start].kind, edge=None, seen_before=False)
        expanded = {start}
        stack = [root]
        while stack:
            parent = stack.pop()
            node = self._nodes[parent.name]
            if isinstance(node, InputNode):
                edges = [(key, target) for key, target in node.edges.items()]
            elif isinstance(node, LogicNode):
                edges = [(node.rule.kind, target) for target in self.successors(node.id)]
            else:
                edges = []
            children = []
            for key, target in edges:
                child = TreeNode(
                    target,
                    parent=parent,
                    kind=self._nodes[target].kind,
                    edge=key,
                    seen_before=target in expanded,
                )
                if target not in expanded:
                    expanded.add(target)
                    children.append(child)
            stack.extend(reversed(children))
        return root

    def render_outline(self, mode_id: str) -> str:
        lines = []
        for pre, _fill, tree_node in RenderTree(self.outline(mode_id)):
            node = self._nodes[tree_node.name]
            edge = f"[{tree_node.edge}] " if tree_node.edge else ""
            if isinstance(node, ResultNode):
                label = f"{node.id} => {node.result_key}"
            elif isinstance(node, InputNode):
                label = f"{node.id}: {node.prompt}"
            else:
                label = f"{node.id} ({node.rule.kind})"
            suffix = " ..." if tree_node.seen_before and not isinstance(node, ResultNode) else ""
            lines.append(f"{pre}{edge}{label}{suffix}")
        return "\n".join(lines)


# =============================================================================
# Loading
# =============================================================================

def load_registry(definition: Algorithm | Mapping[str, Any], **kwargs: Any) -> NodeRegistry:
    """Validate a definition (model or plain dict) and build its registry."""
    algorithm = definition if isinstance(definition, Algorithm) else Algorithm.model_validate(definition)
    return NodeRegistry(algorithm, **kwargs)


def load_registry_file(path: str | Path, **kwargs: Any) -> NodeRegistry:
    """Load an algorithm definition from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return load_registry(data, **kwargs)
