"""
Deck Repository Factory
Centralizes the logic for selecting the deck file format.
"""

from pathlib import Path

from flashsprint.domain.constants import YAML_SUFFIXES
from flashsprint.domain.interfaces import DeckRepository
from flashsprint.infrastructure.persistence.text_format import TextDeckRepository
from flashsprint.infrastructure.persistence.yaml_format import YamlDeckRepository


def get_deck_repository(path: Path) -> DeckRepository:
    """
    Returns the DeckRepository matching the file suffix: YAML for .yaml/.yml,
    the line-oriented text format otherwise.
    """
    if path.suffix.lower() in YAML_SUFFIXES:
        return YamlDeckRepository(path)
    return TextDeckRepository(path)
