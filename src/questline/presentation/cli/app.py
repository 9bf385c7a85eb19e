"""Console player that drives the quest one turn at a time."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from questline.config import ConfigError, Settings, debug_enabled, load_settings
from questline.data.errors import QuestLoadFailure
from questline.data.repositories import QuestRepository
from questline.domain.commands import Choose, Command, Help, Repeat, Restart, Stop, parse_option
from questline.presentation.cli.render import render_bullet_lines, render_heading, render_prompt
from questline.presentation.cli.state_store import StateFileStore
from questline.services.quest_graph_validator import format_issue, validate_quest
from questline.services.turn_service import TurnResult, TurnService

logger = logging.getLogger(__name__)

_TEXT_COMMANDS: dict[str, Command] = {
    "help": Help(),
    "?": Help(),
    "repeat": Repeat(),
    "again": Repeat(),
    "restart": Restart(),
    "start over": Restart(),
    "yes": Repeat(),
    "y": Repeat(),
    "quit": Stop(),
    "exit": Stop(),
    "stop": Stop(),
    "no": Stop(),
    "n": Stop(),
    "q": Stop(),
}


def command_from_text(raw: str) -> Command:
    """Map a line of console input to a command."""
    text = raw.strip().lower()
    if not text:
        return Repeat()
    if text in _TEXT_COMMANDS:
        return _TEXT_COMMANDS[text]
    return Choose(parse_option(text))


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="questline", description="Play a branching quest.")
    parser.add_argument("--quest", help="quest JSON file (defaults to the configured quest)")
    parser.add_argument("--state", help="file holding the saved state between turns")
    parser.add_argument("--config", help="settings JSON file")
    parser.add_argument("--new", action="store_true", help="discard any saved state first")
    parser.add_argument("--validate", action="store_true", help="check the quest graph and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def _setup_logging(settings: Settings, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(level=level, format=fmt, handlers=[logging.StreamHandler(sys.stderr)])


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive console session."""
    args = _parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    _setup_logging(settings, args.verbose)

    quest_repo = QuestRepository(args.quest or settings.quest_file)
    if args.validate:
        return run_validation(quest_repo)

    store = StateFileStore(args.state)
    if args.new:
        store.clear()
    turn_service = TurnService(quest_repo.load, max_hops=settings.max_auto_advance_hops)
    return run_console(turn_service, store)


def run_validation(quest_repo: QuestRepository) -> int:
    """Print the graph report; non-zero when the quest cannot be played."""
    try:
        quest = quest_repo.load()
    except QuestLoadFailure as exc:
        render_heading("Quest invalid")
        print(exc)
        return 1
    issues = validate_quest(quest)
    render_heading(f"{quest.title} ({len(quest)} stations)")
    if not issues:
        print("No issues found.")
        return 0
    render_bullet_lines(format_issue(issue) for issue in issues)
    return 1 if any(issue.severity == "ERROR" for issue in issues) else 0


def run_console(
    turn_service: TurnService,
    store: StateFileStore,
    *,
    input_fn: Callable[[str], str] = input,
) -> int:
    """Play turns until the service stops expecting input."""
    result = _play(turn_service, store, Repeat())
    while result.expect_more_input:
        try:
            raw = input_fn("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            raw = "quit"
        result = _play(turn_service, store, command_from_text(raw))
    return 0


def _play(turn_service: TurnService, store: StateFileStore, command: Command) -> TurnResult:
    result = turn_service.handle(command, store.read())
    store.write(result.state)
    render_prompt(result.prompt_text)
    if debug_enabled():
        logger.debug("State after turn: %s", result.state)
    return result
