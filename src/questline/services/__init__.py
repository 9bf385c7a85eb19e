"""Service layer exports."""

from .errors import ChoiceNotPossible, CorruptState, TraversalLimitExceeded
from .narration import NarrationComposer
from .state_codec import GameStateCodec
from .traversal import AdvanceResult, CurrentView, TraversalEngine
from .turn_service import TurnResult, TurnService

__all__ = [
    "AdvanceResult",
    "ChoiceNotPossible",
    "CorruptState",
    "CurrentView",
    "GameStateCodec",
    "NarrationComposer",
    "TraversalEngine",
    "TraversalLimitExceeded",
    "TurnResult",
    "TurnService",
]
