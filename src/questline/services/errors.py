"""Service-layer exceptions."""


class CorruptState(Exception):
    """Raised when a persisted state blob fails schema or reference validation."""


class ChoiceNotPossible(Exception):
    """Raised when the chosen option does not exist at the current station."""

    def __init__(self, message: str, *, option: int | None = None, choice_count: int = 0) -> None:
        super().__init__(message)
        self.option = option
        self.choice_count = choice_count


class TraversalLimitExceeded(Exception):
    """Raised when auto-advancing passes through too many single-choice stations."""
