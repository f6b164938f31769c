"""Tests for quiz-mode tracking, scoring and result storage."""

import pytest

from mnemo.application.card_utils import process_card_review
from mnemo.application.quiz_tracking import (
    calculate_quiz_score,
    create_quiz_result,
    create_quiz_tracking_state,
    get_incorrect_card_ids_from_quiz,
    get_next_card_index,
    is_quiz_complete,
    reset_quiz_tracking_state,
    result_from_tracking,
    save_quiz_result,
    track_quiz_answer,
)
from mnemo.domain.quiz.models import QuizResult, QuizTrackingState
from mnemo.infrastructure.adapters.memory import InMemoryQuizResultsRepository


def _assert_invariants(state: QuizTrackingState):
    assert state.correct_card_ids | state.incorrect_card_ids <= state.answered_cards
    assert not (state.correct_card_ids & state.incorrect_card_ids)


class TestTracking:
    def test_initial_state_empty(self):
        state = create_quiz_tracking_state()
        assert state.answered_cards == frozenset()
        assert state.correct_card_ids == frozenset()
        assert state.incorrect_card_ids == frozenset()

    def test_reset_returns_empty_state(self):
        state = track_quiz_answer(create_quiz_tracking_state(), "a", True)
        assert reset_quiz_tracking_state() == create_quiz_tracking_state()
        assert state.answered_cards == {"a"}

    def test_correct_answer(self):
        state = track_quiz_answer(create_quiz_tracking_state(), "a", True)

        assert state.answered_cards == {"a"}
        assert state.correct_card_ids == {"a"}
        assert state.incorrect_card_ids == frozenset()

    def test_incorrect_answer(self):
        state = track_quiz_answer(create_quiz_tracking_state(), "a", False)

        assert state.answered_cards == {"a"}
        assert state.incorrect_card_ids == {"a"}
        assert state.correct_card_ids == frozenset()

    def test_reanswer_flips_classification(self):
        state = track_quiz_answer(create_quiz_tracking_state(), "a", False)
        state = track_quiz_answer(state, "a", True)

        assert state.correct_card_ids == {"a"}
        assert state.incorrect_card_ids == frozenset()
        assert len(state.answered_cards) == 1
        _assert_invariants(state)

        state = track_quiz_answer(state, "a", False)
        assert state.incorrect_card_ids == {"a"}
        assert state.correct_card_ids == frozenset()
        _assert_invariants(state)

    def test_previous_state_untouched(self):
        first = track_quiz_answer(create_quiz_tracking_state(), "a", True)
        second = track_quiz_answer(first, "b", False)

        assert first.answered_cards == {"a"}
        assert second.answered_cards == {"a", "b"}

    def test_invariants_over_mixed_answers(self):
        state = create_quiz_tracking_state()
        answers = [("a", True), ("b", False), ("a", False), ("c", True), ("b", True)]
        for card_id, correct in answers:
            state = track_quiz_answer(state, card_id, correct)
            _assert_invariants(state)

        assert state.correct_card_ids == {"b", "c"}
        assert state.incorrect_card_ids == {"a"}


class TestCompletion:
    def test_completes_when_all_answered(self):
        state = create_quiz_tracking_state()
        assert not is_quiz_complete(state, 3)

        for card_id in ("a", "b"):
            state = track_quiz_answer(state, card_id, True)
            assert not is_quiz_complete(state, 3)

        state = track_quiz_answer(state, "c", False)
        assert is_quiz_complete(state, 3)

        state = track_quiz_answer(state, "d", True)
        assert is_quiz_complete(state, 3)

    def test_empty_quiz_never_complete(self):
        assert not is_quiz_complete(create_quiz_tracking_state(), 0)


class TestNextCardIndex:
    def test_quiz_mode_stops_at_last(self):
        assert get_next_card_index(0, 3, True) == 1
        assert get_next_card_index(2, 3, True) == 2

    def test_study_mode_wraps(self):
        assert get_next_card_index(0, 3, False) == 1
        assert get_next_card_index(2, 3, False) == 0

    def test_single_card(self):
        assert get_next_card_index(0, 1, True) == 0
        assert get_next_card_index(0, 1, False) == 0


class TestScore:
    @pytest.mark.parametrize(
        "correct,total,expected",
        [(0, 0, 0), (3, 3, 100), (0, 4, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13)],
    )
    def test_calculate(self, correct, total, expected):
        assert calculate_quiz_score(correct, total) == expected

    def test_create_result(self):
        result = create_quiz_result(4, ["a", "b", "c"], ["d"])

        assert result.total_cards == 4
        assert result.correct_cards == 3
        assert result.incorrect_cards == 1
        assert result.score == 75
        assert result.incorrect_card_ids == ["d"]

    def test_result_from_tracking(self):
        state = create_quiz_tracking_state()
        for card_id, correct in [("b", True), ("a", True), ("c", False)]:
            state = track_quiz_answer(state, card_id, correct)

        result = result_from_tracking(state, 3)

        assert result.correct_card_ids == ["a", "b"]
        assert result.incorrect_card_ids == ["c"]
        assert result.score == 67


class TestQuizResultStorage:
    def test_perfect_run_clears_incorrect_ids(self):
        repo = InMemoryQuizResultsRepository()
        result = QuizResult(
            total_cards=2,
            correct_cards=2,
            incorrect_cards=0,
            score=100,
            correct_card_ids=["a", "b"],
            incorrect_card_ids=["stale"],
        )

        save_quiz_result(repo, "deck", "topic", result)

        assert repo.load("deck", "topic").incorrect_card_ids == []

    def test_incorrect_ids_round_trip(self):
        repo = InMemoryQuizResultsRepository()
        save_quiz_result(repo, "deck", "topic", create_quiz_result(3, ["a"], ["b", "c"]))

        assert get_incorrect_card_ids_from_quiz(repo, "deck", "topic") == ["b", "c"]
        assert get_incorrect_card_ids_from_quiz(repo, "deck", "other") == []


class TestQuizFlow:
    def test_single_chance_run(self, make_card, now):
        """Drive a full quiz the way a presenting surface would."""
        cards = [make_card(f"c{i}") for i in range(3)]
        qualities = {"c0": 5, "c1": 1, "c2": 3}

        state = create_quiz_tracking_state()
        index = 0
        seen = []
        while not is_quiz_complete(state, len(cards)):
            card = cards[index]
            seen.append(card.id)
            review = process_card_review(card, qualities[card.id], now)
            state = track_quiz_answer(state, card.id, review.is_correct)
            index = get_next_card_index(index, len(cards), quiz_mode=True)

        assert seen == ["c0", "c1", "c2"]
        assert index == 2
        result = result_from_tracking(state, len(cards))
        assert result.correct_card_ids == ["c0", "c2"]
        assert result.incorrect_card_ids == ["c1"]
        assert result.score == 67
