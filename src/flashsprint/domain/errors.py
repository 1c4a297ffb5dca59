"""Domain error taxonomy. Every error here is recoverable at the call site."""


class FlashSprintError(Exception):
    """Base class for all FlashSprint errors."""


class InvalidInput(FlashSprintError):
    """Raised when card content fails validation (e.g. an empty question)."""


class NotFound(FlashSprintError):
    """Raised when no card has the requested id."""

    def __init__(self, card_id: int):
        super().__init__(f"No card with ID {card_id}")
        self.card_id = card_id


class MalformedRecord(FlashSprintError):
    """
    Raised by persistence readers for a record that cannot be reconstructed.

    Loaders catch this per record: the record is skipped and the load goes on.
    """

    def __init__(self, reason: str, line_number: int | None = None):
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Malformed record{location}: {reason}")
        self.reason = reason
        self.line_number = line_number


class SessionStateError(FlashSprintError):
    """Raised when a review session operation is called in the wrong state."""
