"""
Domain models for cards and review sessions.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum

from .constants import INITIAL_DUE_IN, INITIAL_INTERVAL


@dataclass(eq=False)
class Card:
    """
    A unit of study material.

    Cards compare and hash by identity: the store owns exactly one object per id,
    and every other structure holds a reference to that object.

    Attributes:
        id: Unique positive id, never reused within a store.
        question: Non-empty prompt text.
        answer: Answer text (may be empty).
        tags: Normalized tags, in the order they were given.
        interval: Rotations to wait after a correct answer (>= 1).
        due_in: Rotations remaining until the card is due (0 = due now).
    """

    id: int
    question: str
    answer: str
    tags: list[str] = field(default_factory=list)
    interval: int = INITIAL_INTERVAL
    due_in: int = INITIAL_DUE_IN

    def __post_init__(self):
        if self.interval < 1:
            raise ValueError(f"interval must be >= 1, got {self.interval}")
        if self.due_in < 0:
            raise ValueError(f"due_in must be >= 0, got {self.due_in}")

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)

    @property
    def is_due(self) -> bool:
        return self.due_in == 0

    def __repr__(self) -> str:
        return (
            f"Card(id={self.id}, question={self.question!r}, tags={self.tags}, "
            f"interval={self.interval}, due_in={self.due_in})"
        )


@dataclass(frozen=True)
class CardRecord:
    """
    Serialized form of a card, exchanged between persistence and the deck.

    Fields are kept raw: validation happens when the record is loaded.
    """

    question: str | None
    answer: str | None
    tags: tuple[str, ...] = ()
    id: int | None = None
    interval: int = INITIAL_INTERVAL
    due_in: int = INITIAL_DUE_IN

    @classmethod
    def from_card(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            question=card.question,
            answer=card.answer,
            tags=tuple(card.tags),
            interval=card.interval,
            due_in=card.due_in,
        )


class Verdict(str, Enum):
    """Collaborator's judgement of an answer."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    CANCEL = "cancel"


class SessionState(str, Enum):
    SCANNING = "scanning"
    PRESENTING = "presenting"
    GRADING = "grading"
    EMPTY = "empty"  # terminal: no cards in the queue
    STOPPED = "stopped"  # terminal: collaborator exited

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.EMPTY, SessionState.STOPPED)
