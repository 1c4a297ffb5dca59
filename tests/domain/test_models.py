import pytest

from flashsprint.domain.errors import MalformedRecord, NotFound
from flashsprint.domain.models import Card, CardRecord, SessionState


def test_card_defaults():
    card = Card(id=1, question="Q", answer="A")
    assert card.interval == 1
    assert card.due_in == 0
    assert card.is_due
    assert card.tags == []


@pytest.mark.parametrize("interval,due_in", [(0, 0), (-3, 0), (1, -1)])
def test_card_rejects_invalid_schedule(interval, due_in):
    with pytest.raises(ValueError):
        Card(id=1, question="Q", answer="A", interval=interval, due_in=due_in)


def test_cards_hash_by_identity():
    a = Card(id=1, question="Q", answer="A")
    b = Card(id=1, question="Q", answer="A")
    assert a != b
    assert len({a, b}) == 2


def test_tag_set_collapses_duplicates():
    card = Card(id=1, question="Q", answer="A", tags=["ds", "ds", "queue"])
    assert card.tag_set == frozenset({"ds", "queue"})


def test_record_from_card():
    card = Card(id=7, question="Q", answer="A", tags=["x"], interval=4, due_in=2)
    record = CardRecord.from_card(card)
    assert record == CardRecord(
        id=7, question="Q", answer="A", tags=("x",), interval=4, due_in=2
    )


def test_terminal_states():
    assert SessionState.EMPTY.is_terminal
    assert SessionState.STOPPED.is_terminal
    assert not SessionState.SCANNING.is_terminal
    assert not SessionState.GRADING.is_terminal


def test_error_messages():
    assert str(NotFound(42)) == "No card with ID 42"
    assert NotFound(42).card_id == 42
    err = MalformedRecord("missing question or answer", 12)
    assert "line 12" in str(err)
    assert err.reason == "missing question or answer"
