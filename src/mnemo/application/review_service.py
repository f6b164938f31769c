"""
Review service: runs one step of a study session against storage.

load cards -> build queue -> (caller presents a card) -> review_card
    -> save merged collection -> bump the daily new-card counter if needed
"""

import logging

from mnemo.application.card_utils import ReviewProcessResult, process_card_review
from mnemo.application.queue_builder import ReviewQueueService, build_review_queue
from mnemo.application.utils.clock import now_ms
from mnemo.domain.cards.models import Card
from mnemo.domain.cards.ports import CardRepository
from mnemo.domain.queue.models import ReviewQueue

logger = logging.getLogger(__name__)


class CardNotFoundError(LookupError):
    def __init__(self, deck_id: str, card_id: str):
        super().__init__(f"Card '{card_id}' not found in deck '{deck_id}'")
        self.deck_id = deck_id
        self.card_id = card_id


class ReviewService:
    """
    Application service wiring the scheduler to the card and config stores.

    The scheduler itself never touches storage; this service owns the
    load/merge/save cycle.
    """

    def __init__(self, card_repo: CardRepository, queue_service: ReviewQueueService):
        self._repo = card_repo
        self._queue = queue_service

    def build_queue(self, deck_id: str, now: int | None = None) -> ReviewQueue:
        cards = self._repo.load_cards(deck_id)
        config = self._queue.load_queue_config(now)
        return build_review_queue(cards, config, now)

    def review_card(
        self,
        deck_id: str,
        card_id: str,
        quality: int,
        now: int | None = None,
    ) -> ReviewProcessResult:
        """
        Apply a rating to one card and persist it.

        Raises:
            CardNotFoundError: If the deck has no card with this ID.
        """
        if now is None:
            now = now_ms()

        cards = self._repo.load_cards(deck_id)
        index = next((i for i, c in enumerate(cards) if c.id == card_id), None)
        if index is None:
            raise CardNotFoundError(deck_id, card_id)

        result = process_card_review(cards[index], quality, now)
        cards[index] = result.updated_card
        self._repo.save_cards(deck_id, cards)

        if result.was_new_card:
            self._queue.increment_new_cards_studied(now)

        logger.info(
            f"Reviewed {card_id} with quality {quality}; "
            f"stability={result.updated_card.state.stability:.2f} "
            f"due={result.updated_card.state.due_date}"
        )
        return result

    def add_cards(self, deck_id: str, new_cards: list[Card]) -> int:
        """
        Merge cards into a deck by ID. Existing cards keep their memory state.

        Returns:
            Number of cards actually added.
        """
        cards = self._repo.load_cards(deck_id)
        known = {c.id for c in cards}
        added: list[Card] = []
        for card in new_cards:
            if card.id not in known:
                known.add(card.id)
                added.append(card)

        if added:
            self._repo.save_cards(deck_id, cards + added)
            logger.info(f"Added {len(added)} cards to '{deck_id}'")
        else:
            logger.info(f"No new cards to add to '{deck_id}'")

        return len(added)
