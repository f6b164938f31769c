"""Helpers for creating cards and processing a single review."""

import math
from dataclasses import dataclass, replace

from ulid import ULID

from mnemo.application.scheduler import create_initial_card_state, update_card_state
from mnemo.application.utils.clock import days_between, now_ms
from mnemo.domain.cards.models import Card, is_correct
from mnemo.domain.constants import CARD_ID_PREFIX


def generate_card_id() -> str:
    """Generate a stable, sortable card ID using ULID."""
    return f"{CARD_ID_PREFIX}{ULID()}"


def create_card(
    front: str,
    back: str,
    tags: frozenset[str] | list[str] | tuple[str, ...] = (),
    card_id: str | None = None,
    now: int | None = None,
) -> Card:
    """New card with initial memory state, due immediately."""
    if now is None:
        now = now_ms()
    return Card(
        id=card_id or generate_card_id(),
        front=front,
        back=back,
        tags=frozenset(tags),
        created_at=now,
        state=create_initial_card_state(now),
    )


def reset_card_state(card: Card, now: int | None = None) -> Card:
    """Forget all review history; the card becomes new again."""
    return replace(card, state=create_initial_card_state(now))


def is_new_card(card: Card) -> bool:
    return card.state.review_count == 0


def get_days_since(timestamp: int, now: int | None = None) -> int:
    """Whole days elapsed (floored)."""
    if now is None:
        now = now_ms()
    return math.floor(days_between(timestamp, now))


def get_days_since_card_created(card: Card, now: int | None = None) -> int:
    return get_days_since(card.created_at, now)


def get_days_since_last_review(card: Card, now: int | None = None) -> int | None:
    """None for a card that has never been reviewed."""
    if is_new_card(card):
        return None
    return get_days_since(card.state.last_review, now)


def filter_cards_for_quiz(
    cards: list[Card],
    topic_id: str | None = None,
    filter_incorrect_only: bool = False,
    previous_incorrect_card_ids: list[str] | None = None,
) -> list[Card]:
    """
    Select the cards for a quiz run.

    A topic is matched against card tags. The incorrect-only filter applies
    only when there is a non-empty list of previously missed cards.
    """
    filtered = list(cards)

    if topic_id:
        filtered = [card for card in filtered if topic_id in card.tags]

    if filter_incorrect_only and previous_incorrect_card_ids:
        missed = set(previous_incorrect_card_ids)
        filtered = [card for card in filtered if card.id in missed]

    return filtered


@dataclass(frozen=True)
class ReviewProcessResult:
    updated_card: Card
    was_new_card: bool
    is_correct: bool  # quality >= 3


def process_card_review(
    card: Card,
    quality: int,
    reviewed_at: int | None = None,
) -> ReviewProcessResult:
    """Update the card's state and report what the caller needs to track."""
    was_new = is_new_card(card)
    result = update_card_state(card, quality, reviewed_at)
    return ReviewProcessResult(
        updated_card=result.card,
        was_new_card=was_new,
        is_correct=is_correct(quality),
    )
