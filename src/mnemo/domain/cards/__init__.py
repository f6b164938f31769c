# Domain Cards Package
from .models import Card, CardState, ReviewQuality, ReviewResult, is_correct
from .ports import CardRepository, QueueConfigRepository, QuizResultsRepository

__all__ = [
    "Card",
    "CardState",
    "ReviewQuality",
    "ReviewResult",
    "is_correct",
    "CardRepository",
    "QueueConfigRepository",
    "QuizResultsRepository",
]
