"""
Deck loader for importing cards from YAML files.

Expected layout:

    cards:
      - id: card_01H...      # optional; generated if missing
        front: "Question"
        back: "Answer"
        tags: [topic-a]      # optional
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from mnemo.application.card_utils import create_card
from mnemo.application.utils.clock import now_ms
from mnemo.domain.cards.models import Card

logger = logging.getLogger(__name__)


def parse_deck(data: Any, now: int | None = None, source: str = "<deck>") -> list[Card]:
    """
    Turn a parsed YAML document into new cards.

    Entries that are not mappings or lack front/back are skipped with a warning.
    """
    if now is None:
        now = now_ms()

    if not isinstance(data, dict):
        logger.warning(f"{source}: expected a mapping with a 'cards' list")
        return []

    entries = data.get("cards", [])
    if not isinstance(entries, list):
        logger.warning(f"{source}: 'cards' is not a list")
        return []

    cards: list[Card] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(f"{source}: entry {i} is not a mapping, skipping")
            continue

        front = entry.get("front")
        back = entry.get("back")
        if not front or not back:
            logger.warning(f"{source}: entry {i} is missing front/back, skipping")
            continue

        tags = entry.get("tags", [])
        if isinstance(tags, str):
            tags = [tags]
        elif not isinstance(tags, list):
            tags = []

        card_id = entry.get("id")
        cards.append(
            create_card(
                front=str(front),
                back=str(back),
                tags=[str(t) for t in tags],
                card_id=str(card_id) if card_id else None,
                now=now,
            )
        )

    return cards


def load_deck_file(path: Path, now: int | None = None) -> list[Card]:
    """
    Read a YAML deck file.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        OSError: If the file cannot be read.
    """
    text = path.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    cards = parse_deck(data, now=now, source=str(path))
    logger.info(f"Loaded {len(cards)} cards from {path}")
    return cards
