# Domain Queue Package
from .models import QueueStats, ReviewQueue, ReviewQueueConfig

__all__ = ["ReviewQueueConfig", "ReviewQueue", "QueueStats"]
