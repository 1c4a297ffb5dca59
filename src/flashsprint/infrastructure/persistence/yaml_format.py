"""
YAML deck format, for export and hand editing.

    version: 1
    cards:
      - id: 1
        question: What is FIFO?
        answer: First In First Out
        tags: [queue, ds]
        interval: 1
        due_in: 0
"""

import logging
from collections.abc import Iterable
from typing import Any

import yaml  # type: ignore
from yaml import YAMLError

from flashsprint.application.utils.text import normalize_tags
from flashsprint.domain.constants import INITIAL_DUE_IN, INITIAL_INTERVAL, YAML_FORMAT_VERSION
from flashsprint.domain.errors import FlashSprintError, MalformedRecord
from flashsprint.domain.interfaces import DeckRepository
from flashsprint.domain.models import CardRecord

logger = logging.getLogger(__name__)


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise MalformedRecord(f"{name} is not an integer: {value!r}")
    try:
        return int(value)
    except ValueError:
        raise MalformedRecord(f"{name} is not an integer: {value!r}") from None


def record_from_dict(item: Any) -> CardRecord:
    if not isinstance(item, dict):
        raise MalformedRecord(f"expected a mapping, got {type(item).__name__}")

    question = item.get("question")
    answer = item.get("answer")
    if question is None or answer is None:
        raise MalformedRecord("missing question or answer")

    tags = item.get("tags") or []
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, list):
        raise MalformedRecord("tags must be a list")

    card_id = _as_int(item.get("id"), "id", 0)

    return CardRecord(
        id=card_id if card_id > 0 else None,
        question=str(question),
        answer=str(answer),
        tags=tuple(normalize_tags(str(t) for t in tags)),
        interval=max(1, _as_int(item.get("interval"), "interval", INITIAL_INTERVAL)),
        due_in=max(0, _as_int(item.get("due_in"), "due_in", INITIAL_DUE_IN)),
    )


def record_to_dict(record: CardRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "question": record.question,
        "answer": record.answer,
        "tags": list(record.tags),
        "interval": record.interval,
        "due_in": record.due_in,
    }


class YamlDeckRepository(DeckRepository):
    def load(self) -> list[CardRecord]:
        if not self.path.exists():
            logger.debug(f"No deck file at {self.path}")
            return []

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (YAMLError, UnicodeDecodeError) as e:
            raise FlashSprintError(f"Could not parse {self.path.name}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, dict) or not isinstance(data.get("cards", []), list):
            raise FlashSprintError(f"{self.path.name}: expected a mapping with a 'cards' list")

        version = data.get("version", YAML_FORMAT_VERSION)
        if version != YAML_FORMAT_VERSION:
            logger.warning(f"{self.path.name}: unknown format version {version}, reading anyway")

        records = []
        for i, item in enumerate(data.get("cards") or [], start=1):
            try:
                records.append(record_from_dict(item))
            except MalformedRecord as e:
                logger.warning(f"Skipping card #{i} in {self.path.name}: {e}")

        logger.info(f"Loaded {len(records)} records from {self.path}")
        return records

    def save(self, records: Iterable[CardRecord]) -> None:
        cards = [record_to_dict(r) for r in records]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(
                {"version": YAML_FORMAT_VERSION, "cards": cards},
                sort_keys=False,
                allow_unicode=True,
            ),
            encoding="utf-8",
        )
        logger.info(f"Saved {len(cards)} records to {self.path}")
