"""
Ports (interfaces) for card, queue-config and quiz-result storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .models import Card

if TYPE_CHECKING:
    from mnemo.domain.queue.models import ReviewQueueConfig
    from mnemo.domain.quiz.models import QuizResult


class CardRepository(ABC):
    """
    Port for loading and saving a deck's card collection.

    Implementations:
        - JsonCardRepository: Versioned JSON document on disk.
        - InMemoryCardRepository: Dict-backed, for tests and embedding.
    """

    @abstractmethod
    def load_cards(self, deck_id: str) -> list[Card]:
        """
        Load every valid card in a deck.

        Invalid records must be dropped here; the scheduler assumes well-formed cards.
        An unknown deck yields an empty list.
        """
        pass

    @abstractmethod
    def save_cards(self, deck_id: str, cards: list[Card]) -> None:
        """Replace the deck's card collection."""
        pass

    @abstractmethod
    def list_deck_ids(self) -> list[str]:
        """Deck IDs that currently hold at least one card."""
        pass

    @abstractmethod
    def clear_deck(self, deck_id: str) -> None:
        """Remove a deck and all of its cards."""
        pass


class QueueConfigRepository(ABC):
    """Port for the persisted review-queue configuration."""

    @abstractmethod
    def load(self) -> "ReviewQueueConfig | None":
        """Return the stored config, or None if nothing (valid) is stored."""
        pass

    @abstractmethod
    def save(self, config: "ReviewQueueConfig") -> None:
        pass


class QuizResultsRepository(ABC):
    """Port for the last quiz result per deck and topic."""

    @abstractmethod
    def load(self, deck_id: str, topic_id: str) -> "QuizResult | None":
        pass

    @abstractmethod
    def save(self, deck_id: str, topic_id: str, result: "QuizResult") -> None:
        pass
