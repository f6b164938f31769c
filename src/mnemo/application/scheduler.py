"""
Scheduling engine: memory-state updates and due/priority queries.

An FSRS-like heuristic. Each review updates difficulty, then stability,
then derives the next interval from both:

    interval_days = max(1, round(stability * (1 + difficulty)))

This is a pure computation module with no I/O. Inputs are assumed
well-formed; an out-of-range quality is a caller contract violation.
"""

from dataclasses import replace

from mnemo.application.utils.clock import days_between, now_ms, round_half_away
from mnemo.domain.cards.models import Card, CardState, ReviewResult
from mnemo.domain.constants import (
    CORRECT_QUALITY_THRESHOLD,
    DIFFICULTY_EASE_STEP,
    DIFFICULTY_LAPSE_STEP,
    FIRST_REVIEW_BONUS_STEP,
    INITIAL_DIFFICULTY,
    INITIAL_EASE_FACTOR,
    INITIAL_STABILITY,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MIN_INTERVAL_DAYS,
    MIN_STABILITY,
    MS_PER_DAY,
    OVERDUE_PRIORITY_WEIGHT,
    STABILITY_GROWTH_STEP,
    STABILITY_PRIORITY_WEIGHT,
    STRUGGLED_STABILITY_FACTOR,
)


def create_initial_card_state(now: int | None = None) -> CardState:
    """Fixed priors for a card that has never been reviewed."""
    if now is None:
        now = now_ms()
    return CardState(
        difficulty=INITIAL_DIFFICULTY,
        stability=INITIAL_STABILITY,
        last_review=now,
        due_date=now,
        review_count=0,
        ease_factor=INITIAL_EASE_FACTOR,
    )


def calculate_difficulty(current: float, quality: int) -> float:
    """
    Quality 0-1 raises difficulty, 4-5 lowers it, 2-3 leave it unchanged.
    """
    difficulty = current
    if quality <= 1:
        difficulty = current + (2 - quality) * DIFFICULTY_LAPSE_STEP
    elif quality >= 4:
        difficulty = current - (quality - 3) * DIFFICULTY_EASE_STEP

    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, difficulty))


def calculate_stability(
    current: float,
    difficulty: float,
    quality: int,
    review_count: int,
) -> float:
    """
    Next stability, given the difficulty already updated for this review.

    A lapse (quality <= 1) discards accumulated stability entirely.
    """
    if review_count == 0:
        if quality >= CORRECT_QUALITY_THRESHOLD:
            return INITIAL_STABILITY * (1 + (quality - 3) * FIRST_REVIEW_BONUS_STEP)
        return MIN_STABILITY

    if quality >= CORRECT_QUALITY_THRESHOLD:
        growth = 1 + (quality - 3) * STABILITY_GROWTH_STEP
        stability = current * growth * (1 + (1 - difficulty))
    elif quality == 2:
        stability = current * STRUGGLED_STABILITY_FACTOR
    else:
        stability = MIN_STABILITY

    return max(MIN_STABILITY, stability)


def calculate_interval(stability: float, difficulty: float) -> int:
    """Interval in whole days, never shorter than one day."""
    return max(MIN_INTERVAL_DAYS, round_half_away(stability * (1 + difficulty)))


def update_card_state(
    card: Card,
    quality: int,
    reviewed_at: int | None = None,
) -> ReviewResult:
    """
    Apply one review to a card.

    Returns a new Card wrapping a new CardState; the input card is untouched.
    ease_factor is carried over unchanged.
    """
    if reviewed_at is None:
        reviewed_at = now_ms()

    state = card.state
    difficulty = calculate_difficulty(state.difficulty, quality)
    stability = calculate_stability(state.stability, difficulty, quality, state.review_count)

    interval_days = calculate_interval(stability, difficulty)
    next_review = reviewed_at + interval_days * MS_PER_DAY

    new_state = CardState(
        difficulty=difficulty,
        stability=stability,
        last_review=reviewed_at,
        due_date=next_review,
        review_count=state.review_count + 1,
        ease_factor=state.ease_factor,
    )

    return ReviewResult(
        card=replace(card, state=new_state),
        quality=quality,
        reviewed_at=reviewed_at,
        next_review=next_review,
    )


def is_card_due(card: Card, now: int | None = None) -> bool:
    if now is None:
        now = now_ms()
    return card.state.due_date <= now


def get_days_until_due(card: Card, now: int | None = None) -> int:
    """Whole days until the card is due; negative if overdue."""
    if now is None:
        now = now_ms()
    return round_half_away(days_between(now, card.state.due_date))


def get_card_priority(card: Card, now: int | None = None) -> float:
    """
    Sort key for presentation, higher = more urgent.

    Not-due cards score -days_until_due, so sooner cards rank higher.
    Due cards score days_overdue * 100 plus a small bonus for low stability,
    so overdue magnitude dominates and fragile cards break ties.
    """
    if now is None:
        now = now_ms()

    if not is_card_due(card, now):
        return -get_days_until_due(card, now)

    days_overdue = -get_days_until_due(card, now)
    stability_factor = 1 / (card.state.stability + 1)
    return days_overdue * OVERDUE_PRIORITY_WEIGHT + stability_factor * STABILITY_PRIORITY_WEIGHT


def sort_cards_by_priority(cards: list[Card], now: int | None = None) -> list[Card]:
    """
    Most urgent first. Stable: ties keep input order. Returns a new list.
    """
    if now is None:
        now = now_ms()
    return sorted(cards, key=lambda card: get_card_priority(card, now), reverse=True)


def get_due_cards(cards: list[Card], now: int | None = None) -> list[Card]:
    if now is None:
        now = now_ms()
    return [card for card in cards if is_card_due(card, now)]
