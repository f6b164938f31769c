"""
In-memory repositories.

Useful for embedding the scheduler in another process and for tests.
Nothing here is shared between instances.
"""

from mnemo.domain.cards.models import Card
from mnemo.domain.cards.ports import CardRepository, QueueConfigRepository, QuizResultsRepository
from mnemo.domain.queue.models import ReviewQueueConfig
from mnemo.domain.quiz.models import QuizResult


class InMemoryCardRepository(CardRepository):
    def __init__(self, decks: dict[str, list[Card]] | None = None):
        self._decks: dict[str, list[Card]] = {
            deck_id: list(cards) for deck_id, cards in (decks or {}).items()
        }

    def load_cards(self, deck_id: str) -> list[Card]:
        return list(self._decks.get(deck_id, []))

    def save_cards(self, deck_id: str, cards: list[Card]) -> None:
        self._decks[deck_id] = list(cards)

    def list_deck_ids(self) -> list[str]:
        return [deck_id for deck_id, cards in self._decks.items() if cards]

    def clear_deck(self, deck_id: str) -> None:
        self._decks.pop(deck_id, None)


class InMemoryQueueConfigRepository(QueueConfigRepository):
    def __init__(self, config: ReviewQueueConfig | None = None):
        self.config = config

    def load(self) -> ReviewQueueConfig | None:
        return self.config

    def save(self, config: ReviewQueueConfig) -> None:
        self.config = config


class InMemoryQuizResultsRepository(QuizResultsRepository):
    def __init__(self):
        self._results: dict[tuple[str, str], QuizResult] = {}

    def load(self, deck_id: str, topic_id: str) -> QuizResult | None:
        return self._results.get((deck_id, topic_id))

    def save(self, deck_id: str, topic_id: str, result: QuizResult) -> None:
        self._results[(deck_id, topic_id)] = result
