"""Study session counters. The elapsed-time display polls update_session_time."""

from dataclasses import dataclass, replace

from mnemo.application.utils.clock import now_ms
from mnemo.domain.constants import MS_PER_SECOND


@dataclass(frozen=True)
class StudySession:
    start_time: int  # Epoch ms
    cards_reviewed: int = 0
    time_spent: int = 0  # Whole seconds


def create_study_session(start_time: int | None = None) -> StudySession:
    if start_time is None:
        start_time = now_ms()
    return StudySession(start_time=start_time)


def update_session_time(session: StudySession, now: int | None = None) -> StudySession:
    """Recompute elapsed time, floored to whole seconds."""
    if now is None:
        now = now_ms()
    return replace(session, time_spent=(now - session.start_time) // MS_PER_SECOND)


def increment_cards_reviewed(session: StudySession) -> StudySession:
    return replace(session, cards_reviewed=session.cards_reviewed + 1)
