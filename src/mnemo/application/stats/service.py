"""
Deck stats service, the application-layer orchestrator.

Coordinates loading a deck from the repository and summarizing it.
"""

import logging

from mnemo.application.queue_builder import ReviewQueueService, build_review_queue, get_queue_stats
from mnemo.domain.cards.ports import CardRepository
from mnemo.domain.queue.models import QueueStats

from .statistics import CollectionStatistics, calculate_statistics

logger = logging.getLogger(__name__)


class DeckStatsService:
    """
    Application service for deck-level statistics.

    Depends on the CardRepository abstraction, not a concrete adapter.
    """

    def __init__(self, card_repo: CardRepository, queue_service: ReviewQueueService):
        self._repo = card_repo
        self._queue = queue_service

    def get_collection_stats(self, deck_id: str, now: int | None = None) -> CollectionStatistics:
        cards = self._repo.load_cards(deck_id)
        logger.debug(f"Computing statistics for {len(cards)} cards in '{deck_id}'")
        return calculate_statistics(cards, now)

    def get_queue_stats(self, deck_id: str, now: int | None = None) -> QueueStats:
        """Stats for the queue a session started now would see."""
        config = self._queue.load_queue_config(now)
        queue = build_review_queue(self._repo.load_cards(deck_id), config, now)
        return get_queue_stats(queue, config)
