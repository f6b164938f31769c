"""
Domain models for cards and their memory state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from mnemo.domain.constants import CORRECT_QUALITY_THRESHOLD


class ReviewQuality(IntEnum):
    """
    How well a card was recalled, 0-5.

    0-2 signal forgetting or difficulty, 3-5 signal success.
    Plain ints in the same range are accepted wherever a quality is expected.
    """

    FORGOT = 0
    HARD = 1
    STRUGGLED = 2
    GOOD = 3
    EASY = 4
    PERFECT = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


def is_correct(quality: int) -> bool:
    """A review counts as correct when quality >= 3."""
    return quality >= CORRECT_QUALITY_THRESHOLD


@dataclass(frozen=True)
class CardState:
    """
    Memory state for a single card.

    Attributes:
        difficulty: Inverse of ease, clamped to [0.1, 0.9]. Higher = harder.
        stability: Days the memory is expected to hold (>= 0.4).
        last_review: Epoch ms of the last review (creation time if never reviewed).
        due_date: Epoch ms when the card next becomes eligible.
        review_count: Completed reviews; 0 means the card is new.
        ease_factor: Legacy SM-2 field, carried through updates but never read.
    """

    difficulty: float
    stability: float
    last_review: int
    due_date: int
    review_count: int
    ease_factor: float


@dataclass(frozen=True)
class Card:
    """
    A flashcard: immutable identity plus its current memory state.

    Updating a card produces a new Card; the original is never mutated.
    """

    id: str
    front: str
    back: str
    state: CardState
    created_at: int
    tags: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ReviewResult:
    """
    Outcome of a single review.

    Attributes:
        card: The card wrapping its new state.
        quality: Rating that produced the update.
        reviewed_at: Epoch ms of the review.
        next_review: Epoch ms the card is next due (same as card.state.due_date).
    """

    card: Card
    quality: int
    reviewed_at: int
    next_review: int
