from datetime import datetime

import pytest

from mnemo.domain.cards.models import Card, CardState
from mnemo.domain.constants import MS_PER_DAY

# Local noon keeps day-boundary tests away from midnight and DST shifts
NOW = int(datetime(2024, 3, 15, 12, 0).timestamp() * 1000)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_card():
    """Factory for cards due `due_in_days` from NOW (negative = overdue)."""

    def _make(
        card_id: str = "c1",
        due_in_days: float = 0,
        review_count: int = 0,
        stability: float = 2.4,
        difficulty: float = 0.3,
        tags=(),
        front: str | None = None,
        back: str | None = None,
    ) -> Card:
        return Card(
            id=card_id,
            front=front if front is not None else f"Question {card_id}",
            back=back if back is not None else f"Answer {card_id}",
            tags=frozenset(tags),
            created_at=NOW - 10 * MS_PER_DAY,
            state=CardState(
                difficulty=difficulty,
                stability=stability,
                last_review=NOW - MS_PER_DAY,
                due_date=NOW + int(due_in_days * MS_PER_DAY),
                review_count=review_count,
                ease_factor=2.5,
            ),
        )

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "MNEMO_DATA_DIR",
        "MNEMO_DECK",
        "MNEMO_MAX_NEW_CARDS_PER_DAY",
        "MNEMO_SHARED_DAILY_BUDGET",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
