"""Maps voice-assistant intents onto player commands."""
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from questline.domain.commands import Choose, Command, Help, Repeat, Restart, Stop, parse_option

CHOICE_INTENT = "ChoiceIntent"
CHOICE_SLOT = "Choice"


class UnsupportedIntent(ValueError):
    """Raised for an intent name the skill does not handle."""


def _choice_from_slots(slots: Mapping[str, Any]) -> Command:
    slot = slots.get(CHOICE_SLOT)
    value = slot.get("value") if isinstance(slot, Mapping) else None
    return Choose(parse_option(value))


_INTENT_COMMANDS: Dict[str, Callable[[Mapping[str, Any]], Command]] = {
    CHOICE_INTENT: _choice_from_slots,
    "AMAZON.HelpIntent": lambda _slots: Help(),
    "AMAZON.StopIntent": lambda _slots: Stop(),
    "AMAZON.CancelIntent": lambda _slots: Stop(),
    "AMAZON.StartOverIntent": lambda _slots: Restart(),
    "AMAZON.RepeatIntent": lambda _slots: Repeat(),
    # answers to "would you like to play again?"
    "AMAZON.YesIntent": lambda _slots: Repeat(),
    "AMAZON.NoIntent": lambda _slots: Stop(),
}


def command_from_intent(intent: Mapping[str, Any] | None) -> Command:
    """Translate an intent payload (``{"name", "slots"}``) into a command."""
    if not isinstance(intent, Mapping):
        raise UnsupportedIntent("Request carries no intent.")
    name = intent.get("name")
    factory = _INTENT_COMMANDS.get(name) if isinstance(name, str) else None
    if factory is None:
        raise UnsupportedIntent(f"Invalid intent: {name!r}")
    slots = intent.get("slots")
    return factory(slots if isinstance(slots, Mapping) else {})
