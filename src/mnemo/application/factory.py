"""
Storage Factory
Centralizes the logic for building repositories and services from config.
"""

from mnemo.application.config import AppConfig
from mnemo.application.queue_builder import ReviewQueueService
from mnemo.application.review_service import ReviewService
from mnemo.application.stats.service import DeckStatsService
from mnemo.domain.cards.ports import CardRepository, QueueConfigRepository, QuizResultsRepository
from mnemo.domain.constants import QUEUE_CONFIG_KEY
from mnemo.infrastructure.adapters.json_store import (
    JsonCardRepository,
    JsonQueueConfigRepository,
    JsonQuizResultsRepository,
)

CARDS_FILE = "cards.json"
QUEUE_CONFIG_FILE = "queue-config.json"
QUIZ_RESULTS_FILE = "quiz-results.json"


def queue_config_key(config: AppConfig, deck_id: str) -> str:
    """
    Storage key for a deck's daily budget.

    Per deck by default; shared_daily_budget restores one budget for all decks.
    """
    if config.shared_daily_budget:
        return QUEUE_CONFIG_KEY
    return f"{QUEUE_CONFIG_KEY}:{deck_id}"


def get_card_repository(config: AppConfig) -> CardRepository:
    return JsonCardRepository(config.data_dir / CARDS_FILE)


def get_queue_config_repository(config: AppConfig, deck_id: str) -> QueueConfigRepository:
    return JsonQueueConfigRepository(
        config.data_dir / QUEUE_CONFIG_FILE,
        key=queue_config_key(config, deck_id),
    )


def get_quiz_results_repository(config: AppConfig) -> QuizResultsRepository:
    return JsonQuizResultsRepository(config.data_dir / QUIZ_RESULTS_FILE)


def get_queue_service(config: AppConfig, deck_id: str) -> ReviewQueueService:
    return ReviewQueueService(
        get_queue_config_repository(config, deck_id),
        default_max_new_cards=config.max_new_cards_per_day,
    )


def get_review_service(config: AppConfig, deck_id: str) -> ReviewService:
    return ReviewService(get_card_repository(config), get_queue_service(config, deck_id))


def get_stats_service(config: AppConfig, deck_id: str) -> DeckStatsService:
    return DeckStatsService(get_card_repository(config), get_queue_service(config, deck_id))
