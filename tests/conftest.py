import pytest

from flashsprint.application.deck import Deck


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so config and default deck paths are isolated."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("FLASHSPRINT_DECK_FILE", "FLASHSPRINT_SEED_SAMPLES", "FLASHSPRINT_PREVIEW_WIDTH"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def deck():
    return Deck()


@pytest.fixture
def deck_file(tmp_path):
    return tmp_path / "deck.txt"


@pytest.fixture
def drain_ids():
    """Ids reachable by draining a deck's review queue (the queue is restored)."""

    def _drain(deck: Deck) -> list[int]:
        cards = []
        while (card := deck.queue.pop_front()) is not None:
            cards.append(card)
        for card in cards:
            deck.queue.push_back(card)
        return [card.id for card in cards]

    return _drain
