"""Tests for the review session state machine and grading policy."""

import pytest

from flashsprint.application.scheduler import apply_verdict, start_session
from flashsprint.domain.errors import SessionStateError
from flashsprint.domain.models import Card, SessionState, Verdict


@pytest.mark.parametrize(
    "interval,verdict,expected",
    [
        (1, Verdict.CORRECT, (2, 2)),
        (8, Verdict.CORRECT, (16, 16)),
        (8, Verdict.INCORRECT, (1, 1)),
        (1, Verdict.INCORRECT, (1, 1)),
        (4, Verdict.CANCEL, (4, 3)),
    ],
)
def test_apply_verdict(interval, verdict, expected):
    card = Card(id=1, question="Q", answer="A", interval=interval, due_in=3)
    apply_verdict(card, verdict)
    assert (card.interval, card.due_in) == expected


class TestScan:
    def test_presents_due_card(self, deck):
        card = deck.add_card("Q", "A")
        session = deck.start_session()

        assert session.state is SessionState.SCANNING
        assert session.scan() is card
        assert session.state is SessionState.PRESENTING
        assert session.current is card
        assert card not in deck.queue

    def test_nothing_due_is_one_step(self, deck):
        a = deck.add_card("Q1", "A")
        b = deck.add_card("Q2", "A")
        a.due_in, b.due_in = 2, 3
        session = deck.start_session()

        assert session.scan() is None
        assert session.state is SessionState.SCANNING
        assert session.rotations == 1
        assert (a.due_in, b.due_in) == (1, 2)
        assert list(deck.queue) == [a, b]

    def test_empty_queue(self, deck):
        session = deck.start_session()
        assert session.state is SessionState.EMPTY
        assert session.is_terminal
        assert session.next_card() is None

    def test_scan_in_wrong_state(self, deck):
        deck.add_card("Q", "A")
        session = deck.start_session()
        session.scan()
        with pytest.raises(SessionStateError):
            session.scan()

    def test_fairness_bound(self, deck):
        waiting = [deck.add_card(f"Q{i}", "A") for i in range(4)]
        for i, card in enumerate(waiting, start=1):
            card.due_in = i
        due = deck.add_card("Due", "A")
        session = deck.start_session()

        assert session.scan() is due
        assert [c.due_in for c in waiting] == [0, 1, 2, 3]
        assert list(deck.queue) == waiting

    def test_earlier_cards_are_decremented_before_due_card(self, deck):
        first = deck.add_card("Q1", "A")
        due = deck.add_card("Q2", "A")
        last = deck.add_card("Q3", "A")
        first.due_in, last.due_in = 1, 1
        session = deck.start_session()

        assert session.scan() is due
        assert (first.due_in, last.due_in) == (0, 1)
        assert list(deck.queue) == [last, first]


class TestNextCard:
    def test_single_waiting_card_surfaces(self, deck):
        card = deck.add_card("Q", "A")
        card.due_in = 3
        session = deck.start_session()

        assert session.next_card() is card
        assert session.rotations == 3

    def test_max_rotations(self, deck):
        card = deck.add_card("Q", "A")
        card.due_in = 5
        session = deck.start_session()

        assert session.next_card(max_rotations=2) is None
        assert session.state is SessionState.SCANNING
        assert card.due_in == 3

    def test_returns_current_while_presenting(self, deck):
        card = deck.add_card("Q", "A")
        session = deck.start_session()
        session.next_card()
        assert session.next_card() is card


class TestGrading:
    def test_correct_then_incorrect(self, deck):
        card = deck.add_card("2+2?", "4", ["math"])
        session = start_session(deck)

        assert session.next_card() is card
        assert session.reveal() == "4"
        session.grade(Verdict.CORRECT)
        assert (card.interval, card.due_in) == (2, 2)
        assert session.state is SessionState.SCANNING
        assert list(deck.queue) == [card]

        assert session.next_card() is card
        session.reveal()
        session.grade(Verdict.INCORRECT)
        assert (card.interval, card.due_in) == (1, 1)
        assert (session.correct, session.incorrect, session.reviewed) == (1, 1, 2)

    def test_graded_card_goes_to_back(self, deck):
        a = deck.add_card("Q1", "A")
        b = deck.add_card("Q2", "A")
        session = deck.start_session()

        session.next_card()
        session.reveal()
        session.grade(Verdict.INCORRECT)
        assert list(deck.queue) == [b, a]

    def test_grade_cancel_stops_and_requeues_unchanged(self, deck):
        card = deck.add_card("Q", "A")
        card.interval = 4
        session = deck.start_session()
        session.next_card()
        session.reveal()

        session.grade(Verdict.CANCEL)

        assert session.state is SessionState.STOPPED
        assert (card.interval, card.due_in) == (4, 0)
        assert card in deck.queue
        assert session.reviewed == 0

    def test_cancel_while_presenting(self, deck):
        a = deck.add_card("Q1", "A")
        b = deck.add_card("Q2", "A")
        session = deck.start_session()
        session.next_card()

        session.cancel()

        assert session.state is SessionState.STOPPED
        assert session.current is None
        assert list(deck.queue) == [b, a]
        assert (a.interval, a.due_in) == (1, 0)

    def test_cancel_is_idempotent(self, deck):
        deck.add_card("Q", "A")
        session = deck.start_session()
        session.cancel()
        session.cancel()
        assert session.state is SessionState.STOPPED
        assert len(deck.queue) == 1

    def test_wrong_state_transitions(self, deck):
        deck.add_card("Q", "A")
        session = deck.start_session()
        with pytest.raises(SessionStateError):
            session.reveal()
        session.next_card()
        with pytest.raises(SessionStateError):
            session.grade(Verdict.CORRECT)

    def test_doubling_keeps_growing(self, deck):
        card = deck.add_card("Q", "A")
        session = deck.start_session()
        for expected in (2, 4, 8, 16):
            session.next_card()
            session.reveal()
            session.grade(Verdict.CORRECT)
            assert (card.interval, card.due_in) == (expected, expected)
