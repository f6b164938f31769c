# Domain Quiz Package
from .models import QuizResult, QuizTrackingState

__all__ = ["QuizTrackingState", "QuizResult"]
