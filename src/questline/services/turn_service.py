"""Turn orchestration between a stateless host and the quest core."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from questline.core.types import StatePayload
from questline.data.errors import QuestLoadFailure
from questline.domain.commands import Choose, Command, Help, Repeat, Restart, Stop, parse_option
from questline.domain.instance import GameInstance
from questline.domain.quest import Quest, UnknownStation
from questline.services.errors import ChoiceNotPossible, CorruptState, TraversalLimitExceeded
from questline.services.narration import NarrationComposer
from questline.services.state_codec import GameStateCodec
from questline.services.traversal import DEFAULT_MAX_HOPS, AdvanceResult, TraversalEngine

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "This is an interactive story. Each time you reach a fork, say the number of "
    "the path you want to take. Say repeat to hear the passage again, start over "
    "to begin again, or stop to leave."
)
GOODBYE_TEXT = "Goodbye."
STORY_ENDED_TEXT = "The story has ended. Would you like to play again?"
RESTART_NOTICE = "I couldn't pick up where you left off, so the story has restarted."
INVALID_CHOICE_NOTE = "That isn't one of the choices."
NOT_UNDERSTOOD_NOTE = "Sorry, I didn't catch a choice number."
QUEST_UNAVAILABLE_TEXT = "Sorry, the story couldn't be loaded right now. Please try again later."
TRAVERSAL_ERROR_TEXT = "Sorry, something went wrong in the story. Please start again later."
NO_GAME_HELP_TEXT = "Say begin when you are ready to start."


@dataclass(slots=True)
class TurnResult:
    """What the host needs after a turn: text to speak and the blob to keep."""

    prompt_text: str
    state: StatePayload | None
    expect_more_input: bool
    reprompt_text: str = ""


class TurnService:
    """Decodes host state, runs one command against the quest and re-encodes."""

    def __init__(
        self,
        quest_loader: Callable[[], Quest],
        *,
        max_hops: int = DEFAULT_MAX_HOPS,
    ) -> None:
        self._quest_loader = quest_loader
        self._max_hops = max_hops

    def begin_turn(
        self,
        prior_state: Mapping[str, Any] | None,
        chosen_option_label: object = None,
    ) -> TurnResult:
        """Play a turn from a raw option label.

        A missing label re-renders the current passage (or starts a new game);
        a label that is not a positive whole number re-prompts with a note.
        """
        if chosen_option_label is None:
            return self.handle(Repeat(), prior_state)
        return self.handle(Choose(parse_option(chosen_option_label)), prior_state)

    def handle(self, command: Command, prior_state: Mapping[str, Any] | None) -> TurnResult:
        """Dispatch one command and return the text and state for the host."""
        if isinstance(command, Stop):
            logger.info("Player stopped; keeping state for a later session")
            return TurnResult(GOODBYE_TEXT, _copy_state(prior_state), expect_more_input=False)

        try:
            quest = self._quest_loader()
        except QuestLoadFailure as exc:
            logger.error("Quest could not be loaded: %s", exc, exc_info=True)
            return TurnResult(QUEST_UNAVAILABLE_TEXT, None, expect_more_input=False)

        turn = _Turn(quest, self._max_hops)
        try:
            return turn.run(command, prior_state)
        except TraversalLimitExceeded as exc:
            logger.error("Traversal aborted: %s", exc, exc_info=True)
            return TurnResult(TRAVERSAL_ERROR_TEXT, None, expect_more_input=False)


class _Turn:
    """Single-use helper bundling the core components for one quest."""

    def __init__(self, quest: Quest, max_hops: int) -> None:
        self.codec = GameStateCodec(quest)
        self.engine = TraversalEngine(quest, max_hops=max_hops)
        self.composer = NarrationComposer(quest)

    def run(self, command: Command, prior_state: Mapping[str, Any] | None) -> TurnResult:
        notice = ""
        if isinstance(command, Restart):
            logger.info("Player restarted the quest")
            instance = None
        else:
            try:
                instance = self.codec.decode(prior_state)
            except CorruptState as exc:
                logger.warning("Discarding corrupt state: %s", exc)
                instance = None
                notice = RESTART_NOTICE

        if instance is None:
            if isinstance(command, Help):
                return TurnResult(
                    f"{HELP_TEXT} {NO_GAME_HELP_TEXT}",
                    None,
                    expect_more_input=True,
                    reprompt_text=NO_GAME_HELP_TEXT,
                )
            return self._start(notice)

        try:
            if isinstance(command, Help):
                return self._present(instance, HELP_TEXT)
            if isinstance(command, Repeat):
                return self._present(instance)
            if isinstance(command, Choose):
                return self._choose(instance, command.option)
        except UnknownStation as exc:
            logger.warning("State references a station the quest no longer has: %s", exc)
            return self._start(RESTART_NOTICE)
        raise TypeError(f"Unsupported command: {command!r}")

    def _start(self, notice: str = "") -> TurnResult:
        result = self.engine.advance(self.engine.start())
        text = self.composer.render(result.visited, include_intro=True)
        logger.info("Started quest '%s'", self.engine.quest.title)
        return self._finish(result, _join(notice, text))

    def _choose(self, instance: GameInstance, option: int | None) -> TurnResult:
        if option is None:
            return self._present(instance, NOT_UNDERSTOOD_NOTE)
        try:
            result = self.engine.advance(instance, option)
        except ChoiceNotPossible as exc:
            logger.warning("Rejected choice: %s", exc)
            return self._present(instance, INVALID_CHOICE_NOTE)
        logger.info("Option %d taken from '%s'", option, instance.current_station_id)
        return self._finish(result, self.composer.render(result.visited))

    def _present(self, instance: GameInstance, note: str = "") -> TurnResult:
        view = self.engine.current(instance)
        text = _join(note, self.composer.render_current(view.station))
        if view.terminal:
            return TurnResult(_join(text, STORY_ENDED_TEXT), None, True, STORY_ENDED_TEXT)
        return TurnResult(
            text,
            self.codec.encode(instance),
            expect_more_input=True,
            reprompt_text=self.composer.render_choices(view.station),
        )

    def _finish(self, result: AdvanceResult, text: str) -> TurnResult:
        if result.terminal:
            logger.info("Quest ended at '%s'", result.station.id)
            return TurnResult(_join(text, STORY_ENDED_TEXT), None, True, STORY_ENDED_TEXT)
        return TurnResult(
            text,
            self.codec.encode(result.instance),
            expect_more_input=True,
            reprompt_text=self.composer.render_choices(result.station),
        )


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _copy_state(prior_state: Mapping[str, Any] | None) -> StatePayload | None:
    if not isinstance(prior_state, Mapping):
        return None
    return dict(prior_state)
