"""Tests for the scheduling engine."""

import random

import pytest

from mnemo.application.scheduler import (
    calculate_difficulty,
    calculate_interval,
    create_initial_card_state,
    get_card_priority,
    get_days_until_due,
    get_due_cards,
    is_card_due,
    sort_cards_by_priority,
    update_card_state,
)
from mnemo.application.utils.clock import round_half_away
from mnemo.domain.cards.models import ReviewQuality
from mnemo.domain.constants import MS_PER_DAY


class TestInitialState:
    def test_priors(self, now):
        state = create_initial_card_state(now)

        assert state.difficulty == 0.3
        assert state.stability == 2.4
        assert state.ease_factor == 2.5
        assert state.review_count == 0
        assert state.last_review == now
        assert state.due_date == now

    def test_defaults_to_wall_clock(self):
        state = create_initial_card_state()
        assert state.last_review == state.due_date
        assert state.last_review > 0


class TestDifficulty:
    @pytest.mark.parametrize(
        "quality,expected",
        [(0, 0.6), (1, 0.45), (2, 0.3), (3, 0.3), (4, 0.2), (5, 0.1)],
    )
    def test_steps(self, quality, expected):
        assert calculate_difficulty(0.3, quality) == pytest.approx(expected)

    def test_clamped_high(self):
        assert calculate_difficulty(0.85, 0) == 0.9

    def test_clamped_low(self):
        assert calculate_difficulty(0.15, 5) == 0.1


class TestFirstReview:
    def test_quality_4(self, make_card, now):
        result = update_card_state(make_card(), ReviewQuality.EASY, now)
        state = result.card.state

        assert state.review_count == 1
        assert state.stability == pytest.approx(2.88)
        assert state.difficulty == pytest.approx(0.2)
        # round(2.88 * 1.2 = 3.456) = 3 days
        assert state.due_date == now + 3 * MS_PER_DAY
        assert result.next_review == state.due_date
        assert state.last_review == now

    def test_quality_3_keeps_initial_stability(self, make_card, now):
        state = update_card_state(make_card(), 3, now).card.state
        assert state.stability == pytest.approx(2.4)
        assert state.difficulty == pytest.approx(0.3)

    def test_quality_5(self, make_card, now):
        state = update_card_state(make_card(), 5, now).card.state
        assert state.stability == pytest.approx(3.36)
        assert state.difficulty == pytest.approx(0.1)
        # round(3.36 * 1.1 = 3.696) = 4 days
        assert state.due_date == now + 4 * MS_PER_DAY

    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_failure_gives_minimum_stability(self, make_card, now, quality):
        state = update_card_state(make_card(), quality, now).card.state
        assert state.stability == 0.4
        assert state.due_date == now + MS_PER_DAY


class TestSubsequentReviews:
    def test_success_grows_stability(self, make_card, now):
        card = make_card(review_count=1, stability=2.88, difficulty=0.2)
        state = update_card_state(card, 3, now).card.state

        # 2.88 * 1.0 * (1 + (1 - 0.2))
        assert state.stability == pytest.approx(5.184)
        # round(5.184 * 1.2 = 6.2208) = 6
        assert state.due_date == now + 6 * MS_PER_DAY
        assert state.review_count == 2

    def test_struggled_grows_slightly(self, make_card, now):
        card = make_card(review_count=4, stability=10.0, difficulty=0.5)
        state = update_card_state(card, 2, now).card.state

        assert state.stability == pytest.approx(12.0)
        assert state.difficulty == pytest.approx(0.5)
        assert state.due_date == now + 18 * MS_PER_DAY

    @pytest.mark.parametrize("quality", [0, 1])
    def test_lapse_resets_stability_exactly(self, make_card, now, quality):
        card = make_card(review_count=7, stability=120.0, difficulty=0.2)
        state = update_card_state(card, quality, now).card.state
        assert state.stability == 0.4

    def test_ease_factor_carried_through(self, make_card, now):
        card = make_card(review_count=2)
        result = update_card_state(card, 5, now)
        assert result.card.state.ease_factor == card.state.ease_factor

    def test_input_card_not_mutated(self, make_card, now):
        card = make_card(review_count=2, stability=5.0)
        before = card.state

        result = update_card_state(card, 4, now)

        assert card.state is before
        assert result.card is not card
        assert result.card.id == card.id
        assert result.card.tags == card.tags


class TestInvariants:
    def test_bounds_hold_over_many_reviews(self, make_card, now):
        rng = random.Random(42)
        card = make_card()
        t = now

        for _ in range(500):
            t += rng.randint(0, 40) * MS_PER_DAY
            card = update_card_state(card, rng.randint(0, 5), t).card
            assert 0.1 <= card.state.difficulty <= 0.9
            assert card.state.stability >= 0.4

    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_success_always_pushes_due_date_forward(self, make_card, now, quality):
        card = make_card(review_count=3, stability=0.4, difficulty=0.9)
        result = update_card_state(card, quality, now)
        assert result.card.state.due_date > card.state.due_date


class TestInterval:
    def test_minimum_one_day(self):
        assert calculate_interval(0.4, 0.1) == 1

    def test_rounds_half_away_from_zero(self):
        assert round_half_away(2.5) == 3
        assert round_half_away(-2.5) == -3
        assert round_half_away(0.5) == 1
        assert round_half_away(1.4999) == 1
        assert round_half_away(-0.4) == 0


class TestDueQueries:
    def test_is_card_due_boundary(self, make_card, now):
        assert is_card_due(make_card(due_in_days=0), now)
        assert is_card_due(make_card(due_in_days=-1), now)
        assert not is_card_due(make_card(due_in_days=0.01), now)

    def test_days_until_due(self, make_card, now):
        assert get_days_until_due(make_card(due_in_days=3), now) == 3
        assert get_days_until_due(make_card(due_in_days=-2), now) == -2
        assert get_days_until_due(make_card(due_in_days=1.5), now) == 2
        assert get_days_until_due(make_card(due_in_days=-1.5), now) == -2

    def test_get_due_cards(self, make_card, now):
        cards = [
            make_card("a", due_in_days=-1),
            make_card("b", due_in_days=2),
            make_card("c", due_in_days=0),
        ]
        assert [c.id for c in get_due_cards(cards, now)] == ["a", "c"]

    def test_get_due_cards_empty(self, now):
        assert get_due_cards([], now) == []


class TestPriority:
    def test_not_due_priority_is_negative_days(self, make_card, now):
        assert get_card_priority(make_card(due_in_days=4), now) == -4

    def test_overdue_priority(self, make_card, now):
        card = make_card(due_in_days=-2, stability=4.0)
        assert get_card_priority(card, now) == pytest.approx(200 + 10 / 5)

    def test_due_now_beats_not_yet_due(self, make_card, now):
        due_now = make_card("a", due_in_days=0)
        almost = make_card("b", due_in_days=0.2)
        assert get_card_priority(due_now, now) > get_card_priority(almost, now)

    def test_sort_order(self, make_card, now):
        future = make_card("future", due_in_days=1)
        one = make_card("one", due_in_days=-1)
        two = make_card("two", due_in_days=-2)

        ordered = sort_cards_by_priority([future, one, two], now)

        assert [c.id for c in ordered] == ["two", "one", "future"]

    def test_fragile_card_breaks_tie(self, make_card, now):
        solid = make_card("solid", due_in_days=-1, stability=20.0)
        fragile = make_card("fragile", due_in_days=-1, stability=0.4)

        ordered = sort_cards_by_priority([solid, fragile], now)

        assert [c.id for c in ordered] == ["fragile", "solid"]

    def test_sort_is_stable_and_does_not_mutate(self, make_card, now):
        cards = [make_card(f"c{i}", due_in_days=0) for i in range(5)]
        original = list(cards)

        ordered = sort_cards_by_priority(cards, now)

        assert [c.id for c in ordered] == ["c0", "c1", "c2", "c3", "c4"]
        assert cards == original
        assert ordered is not cards

    def test_sort_empty(self, now):
        assert sort_cards_by_priority([], now) == []
