"""mnemo CLI: import decks, inspect the review queue, record reviews."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
import yaml

from mnemo.application.config import AppConfig, resolve_config

app = typer.Typer(
    help="mnemo: spaced-repetition scheduling for flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage mnemo configuration.")
app.add_typer(config_app, name="config")

DeckOption = Annotated[
    str | None, typer.Option("--deck", "-d", help="Deck ID. Defaults to 'deck' in config.")
]


def _resolve(ctx: typer.Context, **overrides) -> AppConfig:
    verbose = ctx.obj.get("verbose", 1) if ctx.obj else 1
    return resolve_config({**overrides, "verbose": verbose})


def _truncate(text: str, width: int = 40) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for mnemo."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("import")
def import_deck(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML deck file with a 'cards' list.")],
    deck: DeckOption = None,
):
    """[bold green]Import[/bold green] cards from a YAML deck file."""
    from mnemo.application.deck_loader import load_deck_file
    from mnemo.application.factory import get_review_service

    config = _resolve(ctx, deck=deck)

    try:
        cards = load_deck_file(path)
    except (OSError, yaml.YAMLError) as e:
        typer.secho(f"Could not read {path}: {e}", fg="red")
        raise typer.Exit(1)

    added = get_review_service(config, config.deck).add_cards(config.deck, cards)
    typer.echo(f"Imported {added} new cards into '{config.deck}' ({len(cards) - added} skipped).")


@app.command()
def queue(
    ctx: typer.Context,
    deck: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show today's review queue in presentation order."""
    from mnemo.application.card_status import get_card_status
    from mnemo.application.factory import get_queue_service, get_review_service
    from mnemo.application.queue_builder import get_queue_stats
    from mnemo.application.scheduler import get_days_until_due
    from mnemo.application.utils.clock import now_ms

    config = _resolve(ctx, deck=deck)
    now = now_ms()
    review_queue = get_review_service(config, config.deck).build_queue(config.deck, now)
    queue_config = get_queue_service(config, config.deck).load_queue_config(now)
    stats = get_queue_stats(review_queue, queue_config)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "deck": config.deck,
                    "stats": asdict(stats),
                    "cards": [
                        {
                            "id": card.id,
                            "status": get_card_status(card).value,
                            "days_until_due": get_days_until_due(card, now),
                        }
                        for card in review_queue.all_cards
                    ],
                },
                indent=2,
            )
        )
        return

    if not review_queue.all_cards:
        typer.secho("Nothing due. Come back later.", fg="green")
        return

    typer.echo(
        f"Due: {stats.total_due}  New: {stats.new_cards_in_queue}"
        f"  Reviews: {stats.review_cards_in_queue}"
        f"  New slots left today: {stats.remaining_new_card_slots}"
    )
    for i, card in enumerate(review_queue.all_cards, start=1):
        status = get_card_status(card).value
        days = get_days_until_due(card, now)
        typer.echo(f"  {i:>3}. [{status:<8}] {card.id}  ({days:+d}d)  {_truncate(card.front)}")


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="ID of the card that was reviewed.")],
    quality: Annotated[
        int,
        typer.Argument(min=0, max=5, help="0=Forgot 1=Hard 2=Struggled 3=Good 4=Easy 5=Perfect"),
    ],
    deck: DeckOption = None,
):
    """Record a review and reschedule the card."""
    from mnemo.application.factory import get_review_service
    from mnemo.application.review_service import CardNotFoundError
    from mnemo.application.scheduler import get_days_until_due

    config = _resolve(ctx, deck=deck)

    try:
        result = get_review_service(config, config.deck).review_card(config.deck, card_id, quality)
    except CardNotFoundError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    card = result.updated_card
    verdict = "correct" if result.is_correct else "missed"
    typer.echo(
        f"{card.id}: {verdict}. Next review in {get_days_until_due(card)} days "
        f"(stability {card.state.stability:.2f}, difficulty {card.state.difficulty:.2f})."
    )


@app.command()
def stats(
    ctx: typer.Context,
    deck: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show collection statistics for a deck."""
    from mnemo.application.factory import get_stats_service

    config = _resolve(ctx, deck=deck)
    collection = get_stats_service(config, config.deck).get_collection_stats(config.deck)

    if json_output:
        typer.echo(json.dumps(asdict(collection), indent=2))
        return

    typer.echo(f"Deck: {config.deck}")
    typer.echo(f"  Cards: {collection.total_cards}  Due: {collection.due_count}")
    typer.echo(
        f"  New: {collection.new_count}  Learning: {collection.learning_count}"
        f"  Review: {collection.review_count}  Mastered: {collection.mastered_count}"
    )
    typer.echo(
        f"  Avg stability: {collection.average_stability:.2f}d"
        f"  Avg difficulty: {collection.average_difficulty:.2f}"
        f"  Retention: {collection.retention_rate:.1f}%"
    )


@app.command()
def limit(
    ctx: typer.Context,
    max_new_cards: Annotated[int, typer.Argument(min=1, help="New cards allowed per day.")],
    deck: DeckOption = None,
):
    """Set the daily new-card limit."""
    from mnemo.application.factory import get_queue_service

    config = _resolve(ctx, deck=deck)
    updated = get_queue_service(config, config.deck).update_max_new_cards_per_day(max_new_cards)
    typer.echo(
        f"Daily new-card limit: {updated.max_new_cards_per_day} "
        f"({updated.remaining_new_card_slots} left today)"
    )


@app.command()
def decks(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks that hold cards."""
    from mnemo.application.factory import get_card_repository

    config = _resolve(ctx)
    repo = get_card_repository(config)
    counts = {deck_id: len(repo.load_cards(deck_id)) for deck_id in repo.list_deck_ids()}

    if json_output:
        typer.echo(json.dumps(counts, indent=2))
        return

    if not counts:
        typer.echo("No decks yet. Import one with 'mnemo import'.")
        return

    for deck_id, count in counts.items():
        marker = "*" if deck_id == config.deck else " "
        typer.echo(f"{marker} {deck_id}  ({count} cards)")


@app.command()
def clear(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck to delete.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Delete a deck and all of its review history."""
    from mnemo.application.factory import get_card_repository

    config = _resolve(ctx)
    repo = get_card_repository(config)

    if deck_id not in repo.list_deck_ids():
        typer.secho(f"Deck '{deck_id}' not found.", fg="red")
        raise typer.Exit(1)

    if not force and not typer.confirm(f"Delete deck '{deck_id}' and its review history?"):
        typer.echo("Aborted.")
        raise typer.Exit(1)

    repo.clear_deck(deck_id)
    typer.echo(f"Deleted deck '{deck_id}'.")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
