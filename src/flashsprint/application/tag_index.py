"""
Tag index: normalized tag -> cards bearing it.

Buckets hold references to cards owned by the CardStore. A bucket is dropped
as soon as its last card is unregistered, so every key is a live tag.
"""

import logging

from flashsprint.application.utils.text import normalize_tag
from flashsprint.domain.models import Card

logger = logging.getLogger(__name__)


class TagIndex:
    def __init__(self):
        self._buckets: dict[str, set[Card]] = {}

    def register(self, tag: str, card: Card) -> None:
        """Add `card` under the normalized `tag`, creating the bucket if needed."""
        key = normalize_tag(tag)
        if not key:
            # Callers filter empty tags; indexing "" would leave an unreachable bucket.
            return
        self._buckets.setdefault(key, set()).add(card)

    def unregister(self, tag: str, card: Card) -> None:
        """Remove `card` from the bucket; delete the bucket once it is empty."""
        key = normalize_tag(tag)
        bucket = self._buckets.get(key)
        if bucket is None:
            return
        bucket.discard(card)
        if not bucket:
            del self._buckets[key]
            logger.debug(f"Dropped empty tag bucket '{key}'")

    def lookup(self, tag: str) -> set[Card]:
        """Cards bearing `tag`; lookups are case- and whitespace-insensitive."""
        return set(self._buckets.get(normalize_tag(tag), ()))

    def tags(self) -> list[str]:
        return sorted(self._buckets)

    def counts(self) -> dict[str, int]:
        return {tag: len(self._buckets[tag]) for tag in self.tags()}

    def clear(self) -> None:
        self._buckets.clear()

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and normalize_tag(tag) in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
