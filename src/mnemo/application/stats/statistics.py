"""
Collection statistics for a set of cards.

This is a pure computation module with no I/O. It does not filter by deck;
callers pass the cards they want summarized.
"""

from dataclasses import dataclass

from mnemo.application.card_status import CardStatus, get_card_status
from mnemo.application.scheduler import get_due_cards
from mnemo.application.utils.clock import now_ms
from mnemo.domain.cards.models import Card
from mnemo.domain.constants import MIN_STABILITY


@dataclass(frozen=True)
class CollectionStatistics:
    total_cards: int = 0
    due_count: int = 0
    new_count: int = 0
    learning_count: int = 0
    review_count: int = 0
    mastered_count: int = 0
    average_stability: float = 0.0
    average_difficulty: float = 0.0
    total_reviews: int = 0
    retention_rate: float = 0.0  # % of cards with stability above the lapse floor


def calculate_statistics(cards: list[Card], now: int | None = None) -> CollectionStatistics:
    if not cards:
        return CollectionStatistics()
    if now is None:
        now = now_ms()

    status_counts = {status: 0 for status in CardStatus}
    total_stability = 0.0
    total_difficulty = 0.0
    total_reviews = 0
    retained = 0

    for card in cards:
        status_counts[get_card_status(card)] += 1
        total_stability += card.state.stability
        total_difficulty += card.state.difficulty
        total_reviews += card.state.review_count
        if card.state.stability > MIN_STABILITY:
            retained += 1

    count = len(cards)
    return CollectionStatistics(
        total_cards=count,
        due_count=len(get_due_cards(cards, now)),
        new_count=status_counts[CardStatus.NEW],
        learning_count=status_counts[CardStatus.LEARNING],
        review_count=status_counts[CardStatus.REVIEW],
        mastered_count=status_counts[CardStatus.MASTERED],
        average_stability=total_stability / count,
        average_difficulty=total_difficulty / count,
        total_reviews=total_reviews,
        retention_rate=retained / count * 100,
    )
