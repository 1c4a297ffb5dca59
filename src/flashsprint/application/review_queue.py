"""
Review queue: a FIFO rotation holding every card exactly once.

Rotation order, not due date, decides what surfaces next. Cards that are not
yet due are requeued after their wait is decremented, so the earliest-due
card reaches the front within one pass over the queue.
"""

from collections import deque
from collections.abc import Iterator

from flashsprint.domain.models import Card


class ReviewQueue:
    def __init__(self):
        self._items: deque[Card] = deque()
        self._members: set[int] = set()

    def push_back(self, card: Card) -> None:
        if card.id in self._members:
            raise ValueError(f"Card #{card.id} is already queued")
        self._items.append(card)
        self._members.add(card.id)

    def pop_front(self) -> Card | None:
        if not self._items:
            return None
        card = self._items.popleft()
        self._members.discard(card.id)
        return card

    def peek_front(self) -> Card | None:
        return self._items[0] if self._items else None

    def remove(self, card: Card) -> bool:
        """Excise `card`, keeping the relative order of the rest. O(n)."""
        if card.id not in self._members:
            return False
        self._items.remove(card)
        self._members.discard(card.id)
        return True

    def size(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()
        self._members.clear()

    def __contains__(self, card: object) -> bool:
        return isinstance(card, Card) and card.id in self._members

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
