"""
Card store: the authoritative set of cards.

Owns identity assignment and keeps the tag index in step with every
create and delete. Enqueuing is left to the caller so bulk loads can
choose the queue order.
"""

import logging
from collections.abc import Iterable

from flashsprint.application.tag_index import TagIndex
from flashsprint.application.utils.text import normalize_tags
from flashsprint.domain.errors import InvalidInput, NotFound
from flashsprint.domain.models import Card

logger = logging.getLogger(__name__)


class CardStore:
    def __init__(self, tag_index: TagIndex):
        self.tag_index = tag_index
        self._cards: dict[int, Card] = {}
        self._next_id = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    def create(
        self,
        question: str,
        answer: str,
        tags: Iterable[str] = (),
        card_id: int | None = None,
    ) -> Card:
        """
        Create a card and register its tags.

        Args:
            question: Prompt text; must be non-empty after trimming.
            answer: Answer text, may be empty.
            tags: Raw tags; they are normalized and empty ones dropped.
            card_id: Explicit id for loaders restoring a saved card. The id
                counter is advanced past it so it is never handed out again.

        Raises:
            InvalidInput: Empty question, or an explicit id that is invalid
                or already taken.
        """
        if not question or not question.strip():
            raise InvalidInput("Question must not be empty")

        if card_id is None:
            card_id = self._next_id
        elif card_id < 1:
            raise InvalidInput(f"Card ID must be positive, got {card_id}")
        elif card_id in self._cards:
            raise InvalidInput(f"Card ID {card_id} is already in use")

        card = Card(id=card_id, question=question, answer=answer or "", tags=normalize_tags(tags))
        self._cards[card_id] = card
        self._next_id = max(self._next_id, card_id + 1)

        for tag in card.tag_set:
            self.tag_index.register(tag, card)

        logger.debug(f"Created card #{card.id} tags={card.tags}")
        return card

    def delete(self, card_id: int) -> Card:
        """
        Remove a card from the store and the tag index.

        Returns the removed card so the caller can also excise it from the
        review queue.
        """
        card = self._cards.get(card_id)
        if card is None:
            raise NotFound(card_id)

        for tag in card.tag_set:
            self.tag_index.unregister(tag, card)
        del self._cards[card_id]

        logger.debug(f"Deleted card #{card_id}")
        return card

    def reserve_ids(self, upto: int) -> None:
        """Make sure ids up to and including `upto` are never handed out."""
        self._next_id = max(self._next_id, upto + 1)

    def find_by_id(self, card_id: int) -> Card | None:
        return self._cards.get(card_id)

    def get(self, card_id: int) -> Card:
        card = self._cards.get(card_id)
        if card is None:
            raise NotFound(card_id)
        return card

    def enumerate(self) -> list[Card]:
        """Snapshot of all cards, most recently created first."""
        return list(reversed(self._cards.values()))

    def clear(self) -> None:
        """Forget every card. The id counter is kept so ids are never reused."""
        self._cards.clear()
        self.tag_index.clear()

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def __len__(self) -> int:
        return len(self._cards)
