"""
Quiz-mode tracking: single-chance answering and completion detection.

Session lifecycle, driven by the caller:
    Idle -> InProgress (create_quiz_tracking_state)
         -> Completed (is_quiz_complete returns True)
         -> Idle (reset on restart or topic change)

Every transition returns a new QuizTrackingState.
"""

import logging
from dataclasses import replace

from mnemo.application.utils.clock import round_half_away
from mnemo.domain.cards.ports import QuizResultsRepository
from mnemo.domain.quiz.models import QuizResult, QuizTrackingState

logger = logging.getLogger(__name__)


def create_quiz_tracking_state() -> QuizTrackingState:
    return QuizTrackingState()


def reset_quiz_tracking_state() -> QuizTrackingState:
    return create_quiz_tracking_state()


def track_quiz_answer(
    state: QuizTrackingState,
    card_id: str,
    is_correct: bool,
) -> QuizTrackingState:
    """
    Record an answer.

    A re-answered card moves wholly to its new classification; it is never
    in both the correct and incorrect sets.
    """
    if is_correct:
        correct = state.correct_card_ids | {card_id}
        incorrect = state.incorrect_card_ids - {card_id}
    else:
        correct = state.correct_card_ids - {card_id}
        incorrect = state.incorrect_card_ids | {card_id}

    return QuizTrackingState(
        answered_cards=state.answered_cards | {card_id},
        correct_card_ids=correct,
        incorrect_card_ids=incorrect,
    )


def is_quiz_complete(state: QuizTrackingState, total_cards: int) -> bool:
    return len(state.answered_cards) >= total_cards and total_cards > 0


def get_next_card_index(current_index: int, total_cards: int, quiz_mode: bool) -> int:
    """
    Index of the card to show after the current one is rated.

    Quiz mode stops at the last card (completion is detected separately);
    study mode loops back to the first card.
    """
    if current_index < total_cards - 1:
        return current_index + 1
    if quiz_mode:
        return current_index
    return 0


def calculate_quiz_score(correct_count: int, total_count: int) -> int:
    """Percentage score, 0 for an empty quiz."""
    if total_count == 0:
        return 0
    return round_half_away(correct_count / total_count * 100)


def create_quiz_result(
    total_cards: int,
    correct_card_ids: list[str],
    incorrect_card_ids: list[str],
) -> QuizResult:
    return QuizResult(
        total_cards=total_cards,
        correct_cards=len(correct_card_ids),
        incorrect_cards=len(incorrect_card_ids),
        score=calculate_quiz_score(len(correct_card_ids), total_cards),
        correct_card_ids=list(correct_card_ids),
        incorrect_card_ids=list(incorrect_card_ids),
    )


def result_from_tracking(state: QuizTrackingState, total_cards: int) -> QuizResult:
    """Build a result from a finished tracking state (ids sorted for stable output)."""
    return create_quiz_result(
        total_cards,
        sorted(state.correct_card_ids),
        sorted(state.incorrect_card_ids),
    )


def save_quiz_result(
    repo: QuizResultsRepository,
    deck_id: str,
    topic_id: str,
    result: QuizResult,
) -> None:
    """Persist a result; a perfect run is stored with no incorrect ids."""
    if result.incorrect_cards == 0:
        result = replace(result, incorrect_card_ids=[])
    repo.save(deck_id, topic_id, result)
    logger.info(f"Saved quiz result for {deck_id}/{topic_id}: {result.score}%")


def get_incorrect_card_ids_from_quiz(
    repo: QuizResultsRepository,
    deck_id: str,
    topic_id: str,
) -> list[str]:
    result = repo.load(deck_id, topic_id)
    if result is None:
        return []
    return list(result.incorrect_card_ids)
