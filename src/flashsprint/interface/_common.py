"""Shared helpers for CLI commands: config resolution and deck load/save."""

import logging
from pathlib import Path
from typing import Any

import typer

from flashsprint.application.config import AppConfig, resolve_config
from flashsprint.application.deck import Deck
from flashsprint.application.factory import get_deck_repository
from flashsprint.application.utils.text import truncate
from flashsprint.domain.errors import FlashSprintError
from flashsprint.domain.interfaces import DeckRepository
from flashsprint.domain.models import Card

logger = logging.getLogger(__name__)


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering the global --deck/--verbose options under command options."""
    merged: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        merged["deck_file"] = ctx.obj.get("deck_file")
        merged["verbose"] = ctx.obj.get("verbose_bonus")
    merged.update(overrides)
    return resolve_config(merged)


def open_deck(config: AppConfig) -> tuple[Deck, DeckRepository]:
    """Load the configured deck file into a fresh Deck."""
    repo = get_deck_repository(config.deck_file)
    deck = Deck()

    if not repo.path.exists() and config.seed_samples:
        deck.load_samples()
        logger.info(f"Seeded {len(deck)} sample cards")
        return deck, repo

    try:
        deck.load_records(repo.load())
    except FlashSprintError as e:
        raise fail(e)
    return deck, repo


def save_deck(deck: Deck, repo: DeckRepository) -> None:
    repo.save(deck.to_records())


def fail(error: FlashSprintError | str) -> typer.Exit:
    """Print an error in red and return the Exit to raise."""
    typer.secho(str(error), fg="red", err=True)
    return typer.Exit(1)


def format_card_line(card: Card, width: int) -> str:
    tags = " ".join(card.tags) if card.tags else "-"
    return (
        f"ID {card.id}: Q: {truncate(card.question, width)} | tags: {tags} "
        f"| interval={card.interval} due_in={card.due_in}"
    )


def deck_path_label(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)
