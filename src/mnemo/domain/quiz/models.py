"""
Domain models for quiz mode.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QuizTrackingState:
    """
    Per-session answer tracking for quiz mode.

    Invariants (enforced by the tracking functions on every write):
        correct_card_ids | incorrect_card_ids <= answered_cards
        correct_card_ids & incorrect_card_ids == empty
    """

    answered_cards: frozenset[str] = field(default_factory=frozenset)
    correct_card_ids: frozenset[str] = field(default_factory=frozenset)
    incorrect_card_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class QuizResult:
    """Final score of a quiz run."""

    total_cards: int
    correct_cards: int
    incorrect_cards: int
    score: int  # Percentage, 0-100
    correct_card_ids: list[str] = field(default_factory=list)
    incorrect_card_ids: list[str] = field(default_factory=list)
