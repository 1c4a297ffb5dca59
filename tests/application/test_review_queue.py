import pytest

from flashsprint.application.review_queue import ReviewQueue
from flashsprint.domain.models import Card


def make(card_id):
    return Card(id=card_id, question=f"Q{card_id}", answer="A")


def test_fifo_order():
    q = ReviewQueue()
    cards = [make(i) for i in range(1, 4)]
    for c in cards:
        q.push_back(c)

    assert q.size() == 3
    assert [q.pop_front() for _ in range(3)] == cards
    assert q.pop_front() is None
    assert q.size() == 0


def test_remove_preserves_order():
    q = ReviewQueue()
    a, b, c = make(1), make(2), make(3)
    for card in (a, b, c):
        q.push_back(card)

    assert q.remove(b) is True
    assert list(q) == [a, c]
    assert b not in q
    assert q.remove(b) is False


def test_duplicate_push_rejected():
    q = ReviewQueue()
    card = make(1)
    q.push_back(card)
    with pytest.raises(ValueError):
        q.push_back(card)
    assert len(q) == 1


def test_card_can_be_requeued_after_pop():
    q = ReviewQueue()
    card = make(1)
    q.push_back(card)
    assert q.pop_front() is card
    q.push_back(card)
    assert q.peek_front() is card


def test_iteration_is_a_snapshot():
    q = ReviewQueue()
    q.push_back(make(1))
    q.push_back(make(2))
    for card in q:
        q.remove(card)
    assert q.size() == 0


def test_clear():
    q = ReviewQueue()
    q.push_back(make(1))
    q.clear()
    assert q.peek_front() is None
    assert len(q) == 0
