# Application Stats Package
from .service import DeckStatsService
from .statistics import CollectionStatistics, calculate_statistics

__all__ = ["CollectionStatistics", "calculate_statistics", "DeckStatsService"]
