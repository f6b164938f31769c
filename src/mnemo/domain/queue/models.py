"""
Domain models for review queues and their daily new-card budget.
"""

from dataclasses import dataclass, field

from mnemo.domain.cards.models import Card
from mnemo.domain.constants import DEFAULT_MAX_NEW_CARDS_PER_DAY


@dataclass(frozen=True)
class ReviewQueueConfig:
    """
    Persisted daily budget for introducing new cards.

    Attributes:
        max_new_cards_per_day: Daily cap on new cards (>= 1).
        new_cards_studied_today: New cards already introduced today (>= 0).
        last_study_date: Epoch ms of local midnight of the day the counter belongs to.
    """

    max_new_cards_per_day: int = DEFAULT_MAX_NEW_CARDS_PER_DAY
    new_cards_studied_today: int = 0
    last_study_date: int = 0

    @property
    def remaining_new_card_slots(self) -> int:
        return max(0, self.max_new_cards_per_day - self.new_cards_studied_today)


@dataclass
class ReviewQueue:
    """
    Cards selected for one session.

    new_cards is capped by the daily budget; review_cards is the full sorted
    review set; all_cards is the presentation order.
    """

    new_cards: list[Card] = field(default_factory=list)
    review_cards: list[Card] = field(default_factory=list)
    all_cards: list[Card] = field(default_factory=list)


@dataclass(frozen=True)
class QueueStats:
    total_due: int
    new_cards_available: int
    new_cards_in_queue: int
    review_cards_in_queue: int
    remaining_new_card_slots: int
