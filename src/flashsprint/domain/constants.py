"""Centralized constants for FlashSprint.

Scheduling defaults and file-format markers live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduling ----------
INITIAL_INTERVAL = 1
INITIAL_DUE_IN = 0
CORRECT_MULTIPLIER = 2
RELEARN_INTERVAL = 1
RELEARN_DUE_IN = 1

# ---------- Text persistence ----------
RECORD_SEPARATOR = "---"
FIELD_ID = "ID"
FIELD_QUESTION = "Q"
FIELD_ANSWER = "A"
FIELD_TAGS = "T"
FIELD_INTERVAL = "I"
FIELD_DUE_IN = "D"
TAG_DELIMITER = ","

# ---------- YAML persistence ----------
YAML_FORMAT_VERSION = 1
YAML_SUFFIXES = (".yaml", ".yml")

# ---------- Display ----------
QUESTION_PREVIEW_WIDTH = 60

# ---------- Sample deck ----------
SAMPLE_CARDS = [
    ("What is FIFO in queues?", "First In First Out", ["queue", "ds"]),
    (
        "How to handle collisions in hash map?",
        "Use chaining (linked lists) or open addressing",
        ["hashmap", "ds"],
    ),
    ("What is enqueue operation?", "Insert element at the tail of queue", ["queue", "srs"]),
]
