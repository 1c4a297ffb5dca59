"""FlashSprint CLI: deck management commands and the interactive practice loop."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from flashsprint.application.deck import Deck
from flashsprint.application.factory import get_deck_repository
from flashsprint.application.utils.text import normalize_tag, parse_tags
from flashsprint.domain.errors import FlashSprintError
from flashsprint.domain.models import Verdict
from flashsprint.interface._common import (
    _resolve_with_overrides,
    deck_path_label,
    fail,
    format_card_line,
    open_deck,
    save_deck,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashsprint: spaced-repetition flashcards in your terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Inspect flashsprint configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _log_level(verbose: int) -> int:
    return logging.DEBUG if verbose >= 1 else logging.WARNING


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Show debug logging on stderr."
        ),
    ] = 0,
    deck: Annotated[
        Path | None,
        typer.Option("--deck", "-d", help="Deck file. Defaults to 'deck_file' in config."),
    ] = None,
):
    """Global settings for flashsprint."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose
    ctx.obj["deck_file"] = deck
    logging.getLogger("flashsprint").setLevel(_log_level(verbose))


# ---------------------------------------------------------------------------
# Deck commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    ctx: typer.Context,
    samples: Annotated[
        bool | None,
        typer.Option("--samples/--no-samples", help="Seed the new deck with sample cards."),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing deck file.")
    ] = False,
):
    """Create the deck file."""
    config = _resolve_with_overrides(ctx, seed_samples=samples)
    repo = get_deck_repository(config.deck_file)

    if repo.path.exists() and not force:
        typer.secho(
            f"Deck already exists at {deck_path_label(repo.path)}. Use --force to overwrite.",
            fg="yellow",
        )
        raise typer.Exit(1)

    deck = Deck()
    if config.seed_samples:
        deck.load_samples()
    save_deck(deck, repo)
    typer.secho(
        f"Created {deck_path_label(repo.path)} with {len(deck)} cards.", fg="green"
    )


@app.command()
def add(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Question text (single line).")],
    answer: Annotated[str, typer.Argument(help="Answer text.")] = "",
    tags: Annotated[
        str, typer.Option("--tags", "-t", help="Comma-separated tags, e.g. 'stack,queue'.")
    ] = "",
):
    """[bold green]Add[/bold green] a card. New cards are due immediately."""
    config = _resolve_with_overrides(ctx)
    deck, repo = open_deck(config)

    try:
        card = deck.add_card(question, answer, parse_tags(tags))
    except FlashSprintError as e:
        raise fail(e)

    save_deck(deck, repo)
    typer.echo(f"Added card ID {card.id}")


@app.command()
def delete(
    ctx: typer.Context,
    card_id: Annotated[int, typer.Argument(help="ID of the card to delete.")],
):
    """Delete a card permanently."""
    config = _resolve_with_overrides(ctx)
    deck, repo = open_deck(config)

    try:
        deck.delete_card(card_id)
    except FlashSprintError as e:
        raise fail(e)

    save_deck(deck, repo)
    typer.echo(f"Deleted card #{card_id}")


@app.command()
def search(
    ctx: typer.Context,
    tag: Annotated[str, typer.Argument(help="Tag to search (case-insensitive).")],
):
    """List cards carrying a tag."""
    config = _resolve_with_overrides(ctx)
    deck, _ = open_deck(config)

    label = normalize_tag(tag)
    found = deck.search(tag)
    if not found:
        typer.echo(f"No cards found for tag '{label}'")
        return

    typer.echo(f"Cards with tag '{label}':")
    for card in found:
        typer.echo(format_card_line(card, config.preview_width))


@app.command("list")
def list_cards(ctx: typer.Context):
    """List all cards with their schedule."""
    config = _resolve_with_overrides(ctx)
    deck, _ = open_deck(config)

    if not len(deck):
        typer.echo("No cards.")
        return

    typer.echo("All cards:")
    for card in deck.cards():
        typer.echo(format_card_line(card, config.preview_width))


@app.command()
def tags(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show every tag with its card count."""
    config = _resolve_with_overrides(ctx)
    deck, _ = open_deck(config)
    counts = deck.tags()

    if json_output:
        typer.echo(json.dumps(counts, indent=2))
        return

    if not counts:
        typer.echo("No tags.")
        return
    for tag, count in counts.items():
        typer.echo(f"{tag} ({count})")


# ---------------------------------------------------------------------------
# Practice
# ---------------------------------------------------------------------------


def _read_verdict(raw: str) -> Verdict:
    cmd = raw.strip().lower()
    if cmd == "q":
        return Verdict.CANCEL
    if cmd.startswith("y"):
        return Verdict.CORRECT
    return Verdict.INCORRECT


@app.command()
def practice(
    ctx: typer.Context,
    max_cards: Annotated[
        int | None,
        typer.Option("--max-cards", "-n", min=1, help="Stop after grading this many cards."),
    ] = None,
):
    """[bold green]Practice[/bold green] due cards. Enter 'q' at any prompt to stop."""
    config = _resolve_with_overrides(ctx)
    deck, repo = open_deck(config)

    if not len(deck):
        typer.echo("No cards in the queue. Add some first.")
        return

    session = deck.start_session()
    typer.echo("Starting practice. Enter 'q' at any prompt to stop practicing.")

    try:
        while max_cards is None or session.reviewed < max_cards:
            card = session.next_card()
            if card is None:
                typer.echo("Queue empty.")
                break

            typer.echo(f"\n---\nCard #{card.id}\nQ: {card.question}")
            cmd = typer.prompt(
                "(press Enter to see answer, 'q' to stop)", default="", show_default=False
            )
            if cmd.strip().lower() == "q":
                session.cancel()
                break

            typer.echo(f"A: {session.reveal()}")
            cmd = typer.prompt("Did you answer correctly? (y/n) or 'q' to stop")
            verdict = _read_verdict(cmd)
            session.grade(verdict)

            if verdict is Verdict.CANCEL:
                break
            if verdict is Verdict.CORRECT:
                typer.secho(f"Nice! Interval now {card.interval} rotations.", fg="green")
            else:
                typer.secho("Keep practicing. Interval reset to 1.", fg="yellow")
    except typer.Abort:
        # EOF or Ctrl-C at a prompt: put the card back untouched and keep progress.
        typer.echo("")
    finally:
        session.cancel()
        save_deck(deck, repo)

    typer.echo(
        f"Exiting practice. Reviewed {session.reviewed} "
        f"({session.correct} correct, {session.incorrect} incorrect)."
    )


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@app.command("export")
def export_deck(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Target file (.yaml/.yml for YAML, else text).")],
):
    """Save the deck to another file."""
    config = _resolve_with_overrides(ctx)
    deck, _ = open_deck(config)

    target = get_deck_repository(path)
    target.save(deck.to_records())
    typer.echo(f"Saved {path}")


@app.command("import")
def import_deck(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Source file (.yaml/.yml for YAML, else text).")],
):
    """Replace the deck with the cards from another file."""
    config = _resolve_with_overrides(ctx)
    source = get_deck_repository(path)
    if not source.path.exists():
        raise fail(f"No such file: {path}")

    deck, repo = open_deck(config)
    try:
        loaded = deck.replace_with(source.load())
    except FlashSprintError as e:
        raise fail(e)

    save_deck(deck, repo)
    typer.echo(f"Loaded {path} ({loaded} cards)")


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@app.command()
def doctor(ctx: typer.Context):
    """Check that the card store, tag index and review queue agree."""
    config = _resolve_with_overrides(ctx)
    deck, _ = open_deck(config)

    problems = deck.check_invariants()
    if problems:
        typer.secho(f"Problems: {len(problems)}", fg="red")
        for problem in problems:
            typer.echo(f"  {problem}")
        raise typer.Exit(1)

    typer.secho(f"OK: {len(deck)} cards, {len(deck.tags())} tags.", fg="green")


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
