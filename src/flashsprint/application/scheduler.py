"""
Review scheduler: one study session over a deck's review queue.

The session is a small state machine driven by its caller (usually the CLI):

    SCANNING --scan()--> PRESENTING --reveal()--> GRADING --grade()--> SCANNING
        |                    |                       |
        +--> EMPTY           +--cancel()--> STOPPED  +--grade(CANCEL)--> STOPPED

Each scan() is one bounded pass over the queue, so a deck where nothing is
due yet returns control to the caller after every rotation instead of
spinning.
"""

import logging
from typing import TYPE_CHECKING

from flashsprint.application.review_queue import ReviewQueue
from flashsprint.domain.constants import (
    CORRECT_MULTIPLIER,
    RELEARN_DUE_IN,
    RELEARN_INTERVAL,
)
from flashsprint.domain.errors import SessionStateError
from flashsprint.domain.models import Card, SessionState, Verdict

if TYPE_CHECKING:
    from flashsprint.application.deck import Deck

logger = logging.getLogger(__name__)


def apply_verdict(card: Card, verdict: Verdict) -> None:
    """
    Update a card's scheduling fields for a verdict.

    CORRECT doubles the interval and waits that many rotations.
    INCORRECT collapses the interval to 1 and shows the card again next rotation.
    CANCEL leaves the card untouched.
    """
    if verdict is Verdict.CORRECT:
        card.interval = max(1, card.interval * CORRECT_MULTIPLIER)
        card.due_in = card.interval
    elif verdict is Verdict.INCORRECT:
        card.interval = RELEARN_INTERVAL
        card.due_in = RELEARN_DUE_IN


class ReviewSession:
    def __init__(self, queue: ReviewQueue):
        self.queue = queue
        self.state = SessionState.SCANNING if queue.size() else SessionState.EMPTY
        self.current: Card | None = None
        self.rotations = 0
        self.correct = 0
        self.incorrect = 0

    @property
    def reviewed(self) -> int:
        return self.correct + self.incorrect

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise SessionStateError(f"Session is {self.state.value}, expected {allowed}")

    def scan(self) -> Card | None:
        """
        Make one pass over the queue looking for a due card.

        Pops at most as many cards as the queue held when the pass began.
        Waiting cards have `due_in` decremented and go to the back. The first
        due card is checked out and returned (state PRESENTING). Returns None
        if nothing was due this rotation (state stays SCANNING) or the queue
        is empty (state EMPTY).
        """
        self._require(SessionState.SCANNING)

        initial_size = self.queue.size()
        for _ in range(initial_size):
            card = self.queue.pop_front()
            if card is None:
                break
            if card.due_in > 0:
                card.due_in -= 1
                self.queue.push_back(card)
                continue
            self.current = card
            self.state = SessionState.PRESENTING
            logger.debug(f"Presenting card #{card.id}")
            return card

        if self.queue.size() == 0:
            self.state = SessionState.EMPTY
            logger.debug("Review queue is empty")
        else:
            self.rotations += 1
            logger.debug(f"Nothing due after rotation {self.rotations}")
        return None

    def next_card(self, max_rotations: int | None = None) -> Card | None:
        """
        Scan until a card is presented or the session ends.

        Every fruitless pass decrements every waiting card, so this always
        terminates; `max_rotations` caps the number of passes anyway.
        """
        passes = 0
        while self.state is SessionState.SCANNING:
            if max_rotations is not None and passes >= max_rotations:
                return None
            card = self.scan()
            if card is not None:
                return card
            passes += 1
        return self.current if self.state is SessionState.PRESENTING else None

    def reveal(self) -> str:
        """Move from PRESENTING to GRADING and return the answer."""
        self._require(SessionState.PRESENTING)
        self.state = SessionState.GRADING
        return self.current.answer

    def grade(self, verdict: Verdict) -> Card:
        """Apply the verdict, requeue the card at the back and return it."""
        self._require(SessionState.GRADING)
        card = self.current

        apply_verdict(card, verdict)
        self.queue.push_back(card)
        self.current = None

        if verdict is Verdict.CANCEL:
            self.state = SessionState.STOPPED
            logger.debug(f"Session stopped at card #{card.id}")
        else:
            if verdict is Verdict.CORRECT:
                self.correct += 1
            else:
                self.incorrect += 1
            self.state = SessionState.SCANNING
            logger.debug(
                f"Card #{card.id} graded {verdict.value}: "
                f"interval={card.interval} due_in={card.due_in}"
            )
        return card

    def cancel(self) -> None:
        """Stop the session, returning any checked-out card unchanged."""
        if self.state.is_terminal:
            return
        if self.current is not None:
            self.queue.push_back(self.current)
            self.current = None
        self.state = SessionState.STOPPED

    def drop(self, card: Card) -> bool:
        """Forget `card` if it is checked out; used when the card is deleted."""
        if self.current is not card:
            return False
        self.current = None
        self.state = SessionState.STOPPED
        return True


def start_session(deck: "Deck") -> ReviewSession:
    return deck.start_session()
