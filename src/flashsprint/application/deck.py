"""
Deck: the owned context bundling card store, tag index and review queue.

The three structures must change together for their invariants to hold, so
all mutation from the outside goes through a Deck. Nothing here is module
level state: independent decks (and tests) never share data.
"""

import logging
from collections.abc import Iterable

from flashsprint.application.card_store import CardStore
from flashsprint.application.review_queue import ReviewQueue
from flashsprint.application.scheduler import ReviewSession
from flashsprint.application.tag_index import TagIndex
from flashsprint.domain.constants import SAMPLE_CARDS
from flashsprint.domain.errors import FlashSprintError, MalformedRecord
from flashsprint.domain.models import Card, CardRecord

logger = logging.getLogger(__name__)


class Deck:
    def __init__(self):
        self.tag_index = TagIndex()
        self.store = CardStore(self.tag_index)
        self.queue = ReviewQueue()
        self._session: ReviewSession | None = None

    # ---------- Cards ----------

    def add_card(self, question: str, answer: str, tags: Iterable[str] = ()) -> Card:
        """Create a card and put it at the back of the review queue."""
        card = self.store.create(question, answer, tags)
        self.queue.push_back(card)
        return card

    def delete_card(self, card_id: int) -> Card:
        """Remove a card from the store, the tag index and the review queue."""
        card = self.store.delete(card_id)
        if not self.queue.remove(card) and self._session is not None:
            # Not queued means an active session has it checked out.
            self._session.drop(card)
        return card

    def find(self, card_id: int) -> Card | None:
        return self.store.find_by_id(card_id)

    def get(self, card_id: int) -> Card:
        return self.store.get(card_id)

    def cards(self) -> list[Card]:
        return self.store.enumerate()

    def search(self, tag: str) -> list[Card]:
        """Cards bearing `tag`, ordered by id."""
        return sorted(self.tag_index.lookup(tag), key=lambda c: c.id)

    def tags(self) -> dict[str, int]:
        """Live tags with their card counts."""
        return self.tag_index.counts()

    def __len__(self) -> int:
        return len(self.store)

    # ---------- Persistence hooks ----------

    def load_records(self, records: Iterable[CardRecord]) -> int:
        """
        Add saved cards, keeping their ids and scheduling state.

        Each record is validated before anything is committed, so a bad record
        is skipped without leaving partial state behind. Returns the number of
        cards loaded.
        """
        records = list(records)
        explicit_ids = [r.id for r in records if r.id is not None and r.id > 0]
        if explicit_ids:
            # Id-less records must not take an id a later record was saved with.
            self.store.reserve_ids(max(explicit_ids))

        loaded = 0
        for record in records:
            try:
                self._load_record(record)
            except MalformedRecord as e:
                logger.warning(f"Skipping record: {e}")
                continue
            loaded += 1
        return loaded

    def _load_record(self, record: CardRecord) -> Card:
        if record.question is None or record.answer is None:
            raise MalformedRecord("missing question or answer")
        if not record.question.strip():
            raise MalformedRecord("empty question")
        card_id = record.id if record.id is not None and record.id > 0 else None
        if card_id is not None and card_id in self.store:
            raise MalformedRecord(f"duplicate ID {card_id}")

        try:
            card = self.store.create(
                record.question, record.answer, record.tags, card_id=card_id
            )
        except FlashSprintError as e:
            raise MalformedRecord(str(e)) from e

        card.interval = record.interval if record.interval > 0 else 1
        card.due_in = record.due_in if record.due_in >= 0 else 0
        self.queue.push_back(card)
        return card

    def to_records(self) -> list[CardRecord]:
        """Every card in rotation order; a checked-out card goes last, as if requeued."""
        cards = [card for card in self.queue if card.id in self.store]
        queued = {card.id for card in cards}
        cards.extend(card for card in self.store.enumerate() if card.id not in queued)
        return [CardRecord.from_card(card) for card in cards]

    def clear(self) -> None:
        if self._session is not None:
            self._session.cancel()
            self._session = None
        self.queue.clear()
        self.store.clear()

    def replace_with(self, records: Iterable[CardRecord]) -> int:
        """Drop every card, then load `records`."""
        self.clear()
        return self.load_records(records)

    def load_samples(self) -> list[Card]:
        return [self.add_card(q, a, tags) for q, a, tags in SAMPLE_CARDS]

    # ---------- Review ----------

    def start_session(self) -> ReviewSession:
        if self._session is not None and not self._session.is_terminal:
            self._session.cancel()
        self._session = ReviewSession(self.queue)
        return self._session

    # ---------- Diagnostics ----------

    def check_invariants(self) -> list[str]:
        """
        Return a list of consistency problems (empty when healthy).

        Checks the store/queue bijection, and that the tag index holds exactly
        each card's normalized tags with no empty buckets.
        """
        problems: list[str] = []
        checked_out = self._session.current if self._session is not None else None

        queued_ids = [card.id for card in self.queue]
        if checked_out is not None:
            queued_ids.append(checked_out.id)
        store_ids = {card.id for card in self.store.enumerate()}

        if len(queued_ids) != len(set(queued_ids)):
            problems.append("review queue holds duplicate cards")
        if set(queued_ids) != store_ids:
            missing = sorted(store_ids - set(queued_ids))
            stale = sorted(set(queued_ids) - store_ids)
            if missing:
                problems.append(f"cards missing from review queue: {missing}")
            if stale:
                problems.append(f"stale cards in review queue: {stale}")

        expected: dict[str, set[int]] = {}
        for card in self.store.enumerate():
            for tag in card.tag_set:
                expected.setdefault(tag, set()).add(card.id)
            if card.interval < 1 or card.due_in < 0:
                problems.append(f"card #{card.id} has invalid schedule")

        for tag in self.tag_index.tags():
            indexed = {card.id for card in self.tag_index.lookup(tag)}
            if not indexed:
                problems.append(f"empty tag bucket '{tag}'")
            elif indexed != expected.get(tag, set()):
                problems.append(f"tag '{tag}' indexes {sorted(indexed)}")
        for tag in expected:
            if tag not in self.tag_index:
                problems.append(f"tag '{tag}' missing from index")

        return problems
