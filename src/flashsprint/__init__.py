"""FlashSprint: spaced-repetition flashcards on a rotation queue."""

from flashsprint.consts import VERSION

__version__ = VERSION
