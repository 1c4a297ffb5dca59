"""
Line-oriented deck format.

One `KEY=value` field per line, each record closed by a `---` line:

    ID=1
    Q=What is FIFO?
    A=First In First Out
    T=queue,ds
    I=1
    D=0
    ---

Unknown lines are ignored. A final record without a closing `---` is still
read. Backslashes and newlines inside values are escaped.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from flashsprint.application.utils.text import (
    escape_field,
    join_tags,
    parse_tags,
    unescape_field,
)
from flashsprint.domain.constants import (
    FIELD_ANSWER,
    FIELD_DUE_IN,
    FIELD_ID,
    FIELD_INTERVAL,
    FIELD_QUESTION,
    FIELD_TAGS,
    INITIAL_DUE_IN,
    INITIAL_INTERVAL,
    RECORD_SEPARATOR,
)
from flashsprint.domain.errors import MalformedRecord
from flashsprint.domain.interfaces import DeckRepository
from flashsprint.domain.models import CardRecord

logger = logging.getLogger(__name__)

_KNOWN_FIELDS = (FIELD_ID, FIELD_QUESTION, FIELD_ANSWER, FIELD_TAGS, FIELD_INTERVAL, FIELD_DUE_IN)
# Bytes that were not valid UTF-8 survive decoding as lone surrogates.
_UNDECODABLE = re.compile("[\udc80-\udcff]")


def _parse_int(raw: str, name: str, line_number: int) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise MalformedRecord(f"{name} is not an integer: {raw!r}", line_number) from None


def _build_record(fields: dict[str, tuple[str, int]], start_line: int) -> CardRecord:
    if FIELD_QUESTION not in fields or FIELD_ANSWER not in fields:
        raise MalformedRecord("missing question or answer", start_line)

    for value, line_number in fields.values():
        if _UNDECODABLE.search(value):
            raise MalformedRecord("invalid UTF-8", line_number)

    card_id = None
    if FIELD_ID in fields:
        raw, line_number = fields[FIELD_ID]
        card_id = _parse_int(raw, "ID", line_number)
        if card_id < 1:
            card_id = None

    interval = INITIAL_INTERVAL
    if FIELD_INTERVAL in fields:
        raw, line_number = fields[FIELD_INTERVAL]
        interval = max(1, _parse_int(raw, "interval", line_number))

    due_in = INITIAL_DUE_IN
    if FIELD_DUE_IN in fields:
        raw, line_number = fields[FIELD_DUE_IN]
        due_in = max(0, _parse_int(raw, "due_in", line_number))

    tags_line = fields.get(FIELD_TAGS, ("", start_line))[0]

    return CardRecord(
        id=card_id,
        question=unescape_field(fields[FIELD_QUESTION][0]),
        answer=unescape_field(fields[FIELD_ANSWER][0]),
        tags=tuple(parse_tags(tags_line)),
        interval=interval,
        due_in=due_in,
    )


def parse_deck_text(text: str) -> tuple[list[CardRecord], list[MalformedRecord]]:
    """
    Parse a deck file's contents.

    Returns the well-formed records and the errors for the ones that were
    skipped.
    """
    records: list[CardRecord] = []
    errors: list[MalformedRecord] = []

    fields: dict[str, tuple[str, int]] = {}
    start_line = 1

    def flush():
        if not fields:
            return
        try:
            records.append(_build_record(fields, start_line))
        except MalformedRecord as e:
            errors.append(e)

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.rstrip("\r")
        if line == RECORD_SEPARATOR:
            flush()
            fields = {}
            start_line = line_number + 1
            continue

        key, sep, value = line.partition("=")
        if not sep or key not in _KNOWN_FIELDS:
            continue
        if not fields:
            start_line = line_number
        fields[key] = (value, line_number)

    flush()
    return records, errors


def format_deck_text(records: Iterable[CardRecord]) -> str:
    lines = []
    for record in records:
        if record.id is not None:
            lines.append(f"{FIELD_ID}={record.id}")
        lines.append(f"{FIELD_QUESTION}={escape_field(record.question or '')}")
        lines.append(f"{FIELD_ANSWER}={escape_field(record.answer or '')}")
        lines.append(f"{FIELD_TAGS}={join_tags(record.tags)}")
        lines.append(f"{FIELD_INTERVAL}={record.interval}")
        lines.append(f"{FIELD_DUE_IN}={record.due_in}")
        lines.append(RECORD_SEPARATOR)
    return "\n".join(lines) + ("\n" if lines else "")


class TextDeckRepository(DeckRepository):
    def load(self) -> list[CardRecord]:
        if not self.path.exists():
            logger.debug(f"No deck file at {self.path}")
            return []

        text = self.path.read_text(encoding="utf-8", errors="surrogateescape")
        records, errors = parse_deck_text(text)
        for err in errors:
            logger.warning(f"Skipping record in {self.path.name}: {err}")

        logger.info(f"Loaded {len(records)} records from {self.path}")
        return records

    def save(self, records: Iterable[CardRecord]) -> None:
        records = list(records)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(format_deck_text(records), encoding="utf-8")
        logger.info(f"Saved {len(records)} records to {self.path}")
