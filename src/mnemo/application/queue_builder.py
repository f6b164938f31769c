"""
Queue builder for daily review sessions.

Builds ordered study queues by:
1. Filtering the collection down to due cards
2. Splitting new cards from review cards and sorting each by priority
3. Capping new cards at the remaining daily budget
4. Interleaving: overdue reviews, then new cards, then reviews due today
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from mnemo.application.scheduler import get_days_until_due, get_due_cards, sort_cards_by_priority
from mnemo.application.utils.clock import now_ms, start_of_day
from mnemo.domain.cards.models import Card
from mnemo.domain.cards.ports import QueueConfigRepository
from mnemo.domain.constants import DEFAULT_MAX_NEW_CARDS_PER_DAY
from mnemo.domain.queue.models import QueueStats, ReviewQueue, ReviewQueueConfig

logger = logging.getLogger(__name__)


def build_review_queue(
    cards: list[Card],
    config: ReviewQueueConfig,
    now: int | None = None,
) -> ReviewQueue:
    """
    Select and order the cards for one session.

    Overdue reviews always come first so new-card intake never crowds them
    out. The returned review_cards is the full sorted review set (uncapped),
    used for stats rather than session length.

    Args:
        cards: Whole card collection for the deck.
        config: Daily budget, already reset for today by the caller.
        now: Evaluation time (epoch ms). Defaults to wall clock.

    Returns:
        ReviewQueue with capped new cards, all review cards and presentation order.
    """
    if now is None:
        now = now_ms()

    due_cards = get_due_cards(cards, now)

    new_cards: list[Card] = []
    review_cards: list[Card] = []
    for card in due_cards:
        if card.state.review_count == 0:
            new_cards.append(card)
        else:
            review_cards.append(card)

    sorted_new = sort_cards_by_priority(new_cards, now)
    sorted_reviews = sort_cards_by_priority(review_cards, now)

    remaining_slots = config.remaining_new_card_slots
    limited_new = sorted_new[:remaining_slots]

    overdue_reviews = [c for c in sorted_reviews if get_days_until_due(c, now) < 0]
    due_today_reviews = [c for c in sorted_reviews if get_days_until_due(c, now) >= 0]

    return ReviewQueue(
        new_cards=limited_new,
        review_cards=sorted_reviews,
        all_cards=overdue_reviews + limited_new + due_today_reviews,
    )


def get_queue_stats(queue: ReviewQueue, config: ReviewQueueConfig) -> QueueStats:
    """
    Summary counts for display.

    Note: new_cards_available is queued new cards plus remaining budget, so
    cards already in the queue are counted against the budget twice.
    Displays depend on this exact value.
    """
    remaining_slots = config.remaining_new_card_slots
    return QueueStats(
        total_due=len(queue.all_cards),
        new_cards_available=len(queue.new_cards) + remaining_slots,
        new_cards_in_queue=len(queue.new_cards),
        review_cards_in_queue=len(queue.review_cards),
        remaining_new_card_slots=remaining_slots,
    )


class ReviewQueueService:
    """
    Loads, resets and persists the daily new-card budget.

    Depends on the QueueConfigRepository port; the clock is injectable so
    day rollover can be tested deterministically.
    """

    def __init__(
        self,
        config_repo: QueueConfigRepository,
        clock: Callable[[], int] = now_ms,
        default_max_new_cards: int = DEFAULT_MAX_NEW_CARDS_PER_DAY,
    ):
        """
        Args:
            config_repo: Where the config lives.
            clock: Returns the current time in epoch ms.
            default_max_new_cards: Daily cap used until one is stored.
        """
        self._repo = config_repo
        self._clock = clock
        self._default_max_new = default_max_new_cards

    def load_queue_config(self, now: int | None = None) -> ReviewQueueConfig:
        """
        Load the config, resetting today's counter if the stored day is stale.

        The reset is lazy: it is only written back on the next save.
        `now` pins the study day; it defaults to the service clock.
        """
        today = start_of_day(self._clock() if now is None else now)
        stored = self._repo.load()

        if stored is None:
            return ReviewQueueConfig(
                max_new_cards_per_day=self._default_max_new,
                last_study_date=today,
            )

        if stored.last_study_date != today:
            logger.debug(
                f"New study day; resetting new-card counter "
                f"(was {stored.new_cards_studied_today})"
            )
            return ReviewQueueConfig(
                max_new_cards_per_day=stored.max_new_cards_per_day,
                new_cards_studied_today=0,
                last_study_date=today,
            )

        return stored

    def save_queue_config(self, config: ReviewQueueConfig) -> None:
        self._repo.save(config)

    def increment_new_cards_studied(self, now: int | None = None) -> ReviewQueueConfig:
        config = self.load_queue_config(now)
        updated = replace(config, new_cards_studied_today=config.new_cards_studied_today + 1)
        self.save_queue_config(updated)
        return updated

    def update_max_new_cards_per_day(
        self, max_new_cards: int, now: int | None = None
    ) -> ReviewQueueConfig:
        """Set the daily cap, leaving today's counter untouched."""
        config = self.load_queue_config(now)
        updated = replace(config, max_new_cards_per_day=max_new_cards)
        self.save_queue_config(updated)
        logger.info(f"Daily new-card limit set to {max_new_cards}")
        return updated
