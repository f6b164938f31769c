# Infrastructure Storage Adapters Package
from .json_store import JsonCardRepository, JsonQueueConfigRepository, JsonQuizResultsRepository
from .memory import (
    InMemoryCardRepository,
    InMemoryQueueConfigRepository,
    InMemoryQuizResultsRepository,
)

__all__ = [
    "JsonCardRepository",
    "JsonQueueConfigRepository",
    "JsonQuizResultsRepository",
    "InMemoryCardRepository",
    "InMemoryQueueConfigRepository",
    "InMemoryQuizResultsRepository",
]
