#!/usr/bin/env python3
"""
Command-line front end for dxgraph.

Usage:
    dxgraph list
    dxgraph show mayo2025
    dxgraph run mayo2025 --answers normal,normal,normal,normal,greater
    dxgraph run ase2016 --mode reduced --engine burr
    dxgraph validate ase2016 --exhaustive
    dxgraph validate my_algorithm.json
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path

from .config import get_config
from .domains import create_registry, get_algorithm, list_algorithms
from .errors import DxGraphError, SessionError
from .orchestrators import ENGINE_KINDS, create_traversal_engine
from .registry import NodeRegistry, load_registry_file
from .types import Question, SessionStatus
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _load(target: str, **kwargs) -> NodeRegistry:
    """Bundled algorithm id, or a path to a JSON definition."""
    if target.endswith(".json") or Path(target).is_file():
        return load_registry_file(target, **kwargs)
    if kwargs:
        return create_registry(target, **kwargs)
    return get_algorithm(target)


def _print_question(question: Question) -> None:
    print(f"\n{question.prompt}")
    for i, option in enumerate(question.options, 1):
        print(f"  {i}. {option.label} [{option.value}]")


def _ask(question: Question) -> str:
    """Prompt until a valid option (number or value) is entered."""
    while True:
        _print_question(question)
        raw = input("> ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(question.options):
            return question.options[int(raw) - 1].value
        if raw in question.values:
            return raw
        print(f"Please choose 1-{len(question.options)} or one of {question.values}")


# =============================================================================
# Commands
# =============================================================================

def cmd_list(args: argparse.Namespace) -> int:
    for algorithm in list_algorithms():
        print(f"{algorithm['id']:12} {algorithm['name']}  (modes: {algorithm['modes']})")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    registry = _load(args.algorithm)
    algorithm = registry.algorithm
    print(f"{algorithm.name} [{algorithm.id}]")
    if algorithm.description:
        print(algorithm.description)
    citation = algorithm.citation
    if citation.authors or citation.title:
        print(f"Source: {citation.authors} {citation.title}. {citation.journal}")
    if citation.url:
        print(citation.url)

    modes = [registry.mode(args.mode)] if args.mode else registry.modes
    for mode in modes:
        print(f"\nMode {mode.id}: {mode.name}")
        if mode.description:
            print(f"  {mode.description}")
        print(registry.render_outline(mode.id))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    registry = _load(args.algorithm)
    mode_id = args.mode or registry.modes[0].id
    engine = create_traversal_engine(registry, args.engine)
    session = engine.start(mode_id)

    scripted = [v.strip() for v in args.answers.split(",") if v.strip()] if args.answers is not None else None
    while not engine.is_terminal(session):
        question = engine.current_question(session)
        if scripted is None:
            value = _ask(question)
        elif scripted:
            value = scripted.pop(0)
        else:
            print(f"Answers exhausted before a result; next question ({question.node_id}):")
            _print_question(question)
            return 2
        try:
            engine.answer(session, value)
        except SessionError as e:
            if scripted is not None:
                raise
            print(e.message)

    view = engine.view(session)
    if view.status != SessionStatus.COMPLETE:
        print(f"Session failed: {session.error}")
        return 1
    if scripted:
        logger.warning("Ignoring %d unused answer(s): %s", len(scripted), scripted)

    print(f"\nOutcome: {registry.outcome_label(view.outcome)} ({view.outcome})")
    print("Path: " + " -> ".join(view.path))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    cfg = get_config()
    exhaustive = args.exhaustive or cfg.exhaustive_validation
    # Validation runs on construction
    registry = _load(args.target, exhaustive=False)
    print(f"{registry.id}: {len(registry.nodes)} nodes, {len(registry.modes)} mode(s) OK")
    if exhaustive:
        for mode in registry.modes:
            outcomes = registry.simulate(mode.id, limit=cfg.simulation_limit)
            summary = ", ".join(f"{key}={count}" for key, count in sorted(outcomes.items()))
            print(f"  {mode.id}: {sum(outcomes.values())} answer paths ({summary})")
    return 0


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dxgraph", description="Clinical decision-graph traversal")
    parser.add_argument("--log-level", default=None, help="Logging level (default: DXGRAPH_LOG_LEVEL)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List bundled algorithms")
    p_list.set_defaults(func=cmd_list)

    p_show = sub.add_parser("show", help="Show an algorithm's citation and graph outline")
    p_show.add_argument("algorithm", help="Algorithm id or JSON definition file")
    p_show.add_argument("--mode", help="Only show this entry mode")
    p_show.set_defaults(func=cmd_show)

    p_run = sub.add_parser("run", help="Run an assessment interactively or from scripted answers")
    p_run.add_argument("algorithm", help="Algorithm id or JSON definition file")
    p_run.add_argument("--mode", help="Entry mode (default: the first declared)")
    p_run.add_argument("--engine", choices=ENGINE_KINDS, default="base", help="Traversal engine")
    p_run.add_argument("--answers", help="Comma-separated answer values, in question order")
    p_run.set_defaults(func=cmd_run)

    p_validate = sub.add_parser("validate", help="Load and validate an algorithm graph")
    p_validate.add_argument("target", help="Algorithm id or JSON definition file")
    p_validate.add_argument("--exhaustive", action="store_true", help="Simulate every answer combination")
    p_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = get_config()
        cfg.validate()
        setup_logging(args.log_level or cfg.log_level, args.log_file)
        return args.func(args)
    except (DxGraphError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAborted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
