import re
from collections.abc import Iterable

from flashsprint.domain.constants import QUESTION_PREVIEW_WIDTH, TAG_DELIMITER

# ---------- Tags ----------

# Characters that delimit tags or records in the text format; a tag never holds one.
_TAG_BREAKS = re.compile(r"[,\r\n]")


def normalize_tag(tag: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return tag.strip().lower()


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """
    Normalize each tag, dropping those that end up empty. Order is kept.

    A tag containing a comma or line break is split at it, so "c,d" becomes
    two tags exactly as it would after a save and reload.
    """
    out = []
    for tag in tags:
        for part in _TAG_BREAKS.split(tag):
            norm = normalize_tag(part)
            if norm:
                out.append(norm)
    return out


def parse_tags(line: str) -> list[str]:
    """Split a comma-separated tag line, e.g. ' Queue, ds ,,' -> ['queue', 'ds']."""
    return normalize_tags(line.split(TAG_DELIMITER))


def join_tags(tags: Iterable[str]) -> str:
    return TAG_DELIMITER.join(tags)


# ---------- Display ----------


def truncate(text: str, width: int = QUESTION_PREVIEW_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[:width] + "..."


# ---------- Line-safe field values ----------
# Text records are one field per line, so embedded newlines must be escaped.


def escape_field(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def unescape_field(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            nxt = value[i + 1]
            if nxt == "n":
                out.append("\n")
                i += 2
                continue
            if nxt == "r":
                out.append("\r")
                i += 2
                continue
            if nxt == "\\":
                out.append("\\")
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)
