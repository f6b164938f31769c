"""Card status classification and collection filters."""

from enum import Enum
from typing import Literal

from mnemo.domain.cards.models import Card
from mnemo.domain.constants import LEARNING_REVIEW_THRESHOLD, MASTERED_STABILITY_THRESHOLD


class CardStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


def get_card_status(card: Card) -> CardStatus:
    """
    new: never reviewed; learning: fewer than 3 reviews;
    mastered: stability >= 30 days; review: everything else.
    """
    state = card.state
    if state.review_count == 0:
        return CardStatus.NEW
    if state.review_count < LEARNING_REVIEW_THRESHOLD:
        return CardStatus.LEARNING
    if state.stability >= MASTERED_STABILITY_THRESHOLD:
        return CardStatus.MASTERED
    return CardStatus.REVIEW


def get_status_label(status: CardStatus) -> str:
    return status.value.capitalize()


def filter_cards_by_status(
    cards: list[Card],
    status: CardStatus | Literal["all"],
) -> list[Card]:
    if status == "all":
        return list(cards)
    return [card for card in cards if get_card_status(card) == status]


def filter_cards_by_tag(cards: list[Card], tag: str) -> list[Card]:
    """Cards carrying `tag`; the pseudo-tag "all" keeps everything."""
    if tag == "all":
        return list(cards)
    return [card for card in cards if tag in card.tags]


def search_cards(cards: list[Card], search_text: str) -> list[Card]:
    """Case-insensitive substring match on front and back."""
    if not search_text.strip():
        return list(cards)
    needle = search_text.lower()
    return [
        card
        for card in cards
        if needle in card.front.lower() or needle in card.back.lower()
    ]
