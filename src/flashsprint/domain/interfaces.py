"""
Ports (interfaces) for deck persistence.

Application code depends on these abstractions, not on a concrete file format.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from .models import CardRecord


class DeckRepository(ABC):
    """
    Port for reading and writing a deck file.

    Implementations:
        - TextDeckRepository: key=value lines with a `---` record sentinel.
        - YamlDeckRepository: a YAML document with a `cards` list.
    """

    def __init__(self, path: Path):
        self.path = path

    @abstractmethod
    def load(self) -> list[CardRecord]:
        """
        Read every well-formed record from the file.

        Malformed records are skipped and logged, never fatal.
        A missing file yields an empty list.
        """
        pass

    @abstractmethod
    def save(self, records: Iterable[CardRecord]) -> None:
        """Write the records, replacing the file's contents."""
        pass
