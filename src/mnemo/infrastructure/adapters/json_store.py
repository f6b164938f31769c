"""
JSON store: infrastructure adapters backed by JSON files on disk.

Implements CardRepository, QueueConfigRepository and QuizResultsRepository.
Records are validated with pydantic on the way in; anything malformed is
dropped with a warning so the scheduler only ever sees well-formed cards.

Card documents are versioned:
    v0: a bare list of cards, or {"cards": [...]} with no version
    v1: {"version": 1, "cards": [...]}
    v2: {"version": 2, "decks": {deck_id: [...]}}
Older documents are migrated on read and written back.
"""

import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from mnemo.application.utils.clock import now_ms
from mnemo.domain.cards.models import Card, CardState
from mnemo.domain.cards.ports import CardRepository, QueueConfigRepository, QuizResultsRepository
from mnemo.domain.constants import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_DECK_ID,
    INITIAL_EASE_FACTOR,
    QUEUE_CONFIG_KEY,
)
from mnemo.domain.queue.models import ReviewQueueConfig
from mnemo.domain.quiz.models import QuizResult

logger = logging.getLogger(__name__)


# ---------- Stored record schemas ----------


class _StoredModel(BaseModel):
    # Accept both snake_case and the camelCase keys of browser-exported data
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredCardState(_StoredModel):
    # Strict types: a numeric field stored as a string marks the record as corrupt
    difficulty: StrictFloat | StrictInt
    stability: StrictFloat | StrictInt
    last_review: StrictInt
    due_date: StrictInt
    review_count: StrictInt = Field(default=0, ge=0)
    ease_factor: StrictFloat | StrictInt = INITIAL_EASE_FACTOR

    def to_domain(self) -> CardState:
        return CardState(
            difficulty=float(self.difficulty),
            stability=float(self.stability),
            last_review=self.last_review,
            due_date=self.due_date,
            review_count=self.review_count,
            ease_factor=float(self.ease_factor),
        )


class StoredCard(_StoredModel):
    id: StrictStr
    front: StrictStr
    back: StrictStr
    state: StoredCardState
    tags: list[str] = Field(default_factory=list)
    created_at: StrictInt | None = None

    def to_domain(self) -> Card:
        state = self.state.to_domain()
        return Card(
            id=self.id,
            front=self.front,
            back=self.back,
            tags=frozenset(self.tags),
            created_at=self.created_at if self.created_at is not None else state.last_review,
            state=state,
        )

    @classmethod
    def from_domain(cls, card: Card) -> "StoredCard":
        s = card.state
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            tags=sorted(card.tags),
            created_at=card.created_at,
            state=StoredCardState(
                difficulty=s.difficulty,
                stability=s.stability,
                last_review=s.last_review,
                due_date=s.due_date,
                review_count=s.review_count,
                ease_factor=s.ease_factor,
            ),
        )


class StoredQueueConfig(_StoredModel):
    max_new_cards_per_day: StrictInt = Field(ge=1)
    new_cards_studied_today: StrictInt = Field(default=0, ge=0)
    last_study_date: StrictInt = 0

    def to_domain(self) -> ReviewQueueConfig:
        return ReviewQueueConfig(
            max_new_cards_per_day=self.max_new_cards_per_day,
            new_cards_studied_today=self.new_cards_studied_today,
            last_study_date=self.last_study_date,
        )


class StoredQuizResult(_StoredModel):
    total_cards: StrictInt = Field(ge=0)
    correct_cards: StrictInt = Field(ge=0)
    incorrect_cards: StrictInt = Field(ge=0)
    score: StrictInt
    correct_card_ids: list[str] = Field(default_factory=list)
    incorrect_card_ids: list[str] = Field(default_factory=list)

    def to_domain(self) -> QuizResult:
        return QuizResult(**self.model_dump())


# ---------- File helpers ----------


def _read_json(path: Path) -> Any | None:
    """Parsed JSON content, or None if the file is missing or unreadable."""
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return None


def _write_json(path: Path, data: Any) -> None:
    """Write atomically: a crash mid-write leaves the previous file intact."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# ---------- Schema migration ----------


def _empty_document() -> dict[str, Any]:
    return {"version": CURRENT_SCHEMA_VERSION, "decks": {}, "last_saved": now_ms()}


def _schema_version(data: Any) -> int:
    """
    Declared schema version; 0 for a legacy document.

    Numeric versions are accepted in any JSON number form ("2", 2.0). A
    document holding a `decks` mapping is never older than the current schema.
    """
    if not isinstance(data, dict):
        return 0

    version = data.get("version")
    if isinstance(version, str):
        try:
            version = float(version)
        except ValueError:
            version = None

    parsed = 0
    if isinstance(version, (int, float)) and not isinstance(version, bool):
        if math.isfinite(version):
            parsed = int(version)

    if isinstance(data.get("decks"), dict):
        return max(parsed, CURRENT_SCHEMA_VERSION)
    return parsed


def migrate_schema(data: Any) -> dict[str, Any]:
    """Bring a card document of any known version up to the current schema."""
    if isinstance(data, list):
        data = {"version": 1, "cards": data, "last_saved": now_ms()}
    elif not isinstance(data, dict):
        return _empty_document()

    version = _schema_version(data)

    if version < 1:
        cards = data.get("cards")
        data = {
            "version": 1,
            "cards": cards if isinstance(cards, list) else [],
            "last_saved": data.get("last_saved") or data.get("lastSaved") or now_ms(),
        }
        version = 1

    if version < 2:
        cards = data.get("cards")
        data = {
            "version": 2,
            "decks": {DEFAULT_DECK_ID: cards if isinstance(cards, list) else []},
            "last_saved": data.get("last_saved") or data.get("lastSaved") or now_ms(),
        }
        version = 2

    if version > CURRENT_SCHEMA_VERSION:
        logger.warning(f"Unknown schema version {version}, attempting to use as-is")

    if not isinstance(data.get("decks"), dict):
        data = {**data, "decks": {}}

    return data


# ---------- Repositories ----------


class JsonCardRepository(CardRepository):
    """Stores every deck in a single versioned JSON document."""

    def __init__(self, path: Path):
        self.path = path

    def _load_document(self) -> dict[str, Any]:
        raw = _read_json(self.path)
        if raw is None:
            return _empty_document()

        original_version = _schema_version(raw)
        document = migrate_schema(raw)

        if original_version < CURRENT_SCHEMA_VERSION:
            logger.info(f"Migrated {self.path} from schema v{original_version}")
            try:
                _write_json(self.path, document)
            except OSError as e:
                # Keep working with the migrated copy in memory
                logger.error(f"Failed to persist migrated schema: {e}")

        return document

    def load_cards(self, deck_id: str) -> list[Card]:
        records = self._load_document()["decks"].get(deck_id, [])
        if not isinstance(records, list):
            logger.warning(f"Deck '{deck_id}' is not a list of cards, ignoring")
            return []

        cards: list[Card] = []
        for i, raw in enumerate(records):
            try:
                cards.append(StoredCard.model_validate(raw).to_domain())
            except ValidationError as e:
                logger.warning(f"Dropping invalid card #{i} in deck '{deck_id}': {e}")

        return cards

    def save_cards(self, deck_id: str, cards: list[Card]) -> None:
        document = self._load_document()
        decks = dict(document["decks"])
        decks[deck_id] = [StoredCard.from_domain(c).model_dump() for c in cards]
        _write_json(
            self.path,
            {"version": CURRENT_SCHEMA_VERSION, "decks": decks, "last_saved": now_ms()},
        )

    def list_deck_ids(self) -> list[str]:
        decks = self._load_document()["decks"]
        return [d for d, cards in decks.items() if isinstance(cards, list) and cards]

    def clear_deck(self, deck_id: str) -> None:
        document = self._load_document()
        decks = {d: cards for d, cards in document["decks"].items() if d != deck_id}
        _write_json(
            self.path,
            {"version": CURRENT_SCHEMA_VERSION, "decks": decks, "last_saved": now_ms()},
        )
        logger.info(f"Cleared deck '{deck_id}' from {self.path}")


class JsonQueueConfigRepository(QueueConfigRepository):
    """
    Stores queue configs as a key -> config mapping in one JSON file.

    The key decides whether decks share a daily budget (one key) or each
    deck gets its own (one key per deck).
    """

    def __init__(self, path: Path, key: str = QUEUE_CONFIG_KEY):
        self.path = path
        self.key = key

    def _load_all(self) -> dict[str, Any]:
        raw = _read_json(self.path)
        return raw if isinstance(raw, dict) else {}

    def load(self) -> ReviewQueueConfig | None:
        raw = self._load_all().get(self.key)
        if raw is None:
            return None
        try:
            return StoredQueueConfig.model_validate(raw).to_domain()
        except ValidationError as e:
            logger.warning(f"Ignoring invalid queue config '{self.key}': {e}")
            return None

    def save(self, config: ReviewQueueConfig) -> None:
        data = self._load_all()
        data[self.key] = StoredQueueConfig(
            max_new_cards_per_day=config.max_new_cards_per_day,
            new_cards_studied_today=config.new_cards_studied_today,
            last_study_date=config.last_study_date,
        ).model_dump()
        _write_json(self.path, data)


class JsonQuizResultsRepository(QuizResultsRepository):
    """Keeps the latest result per deck and topic."""

    def __init__(self, path: Path):
        self.path = path

    @staticmethod
    def _key(deck_id: str, topic_id: str) -> str:
        return f"quiz-results-{deck_id}-{topic_id}"

    def _load_all(self) -> dict[str, Any]:
        raw = _read_json(self.path)
        return raw if isinstance(raw, dict) else {}

    def load(self, deck_id: str, topic_id: str) -> QuizResult | None:
        raw = self._load_all().get(self._key(deck_id, topic_id))
        if raw is None:
            return None
        try:
            return StoredQuizResult.model_validate(raw).to_domain()
        except ValidationError as e:
            logger.warning(f"Ignoring invalid quiz result for {deck_id}/{topic_id}: {e}")
            return None

    def save(self, deck_id: str, topic_id: str, result: QuizResult) -> None:
        data = self._load_all()
        data[self._key(deck_id, topic_id)] = StoredQuizResult(
            total_cards=result.total_cards,
            correct_cards=result.correct_cards,
            incorrect_cards=result.incorrect_cards,
            score=result.score,
            correct_card_ids=list(result.correct_card_ids),
            incorrect_card_ids=list(result.incorrect_card_ids),
        ).model_dump()
        _write_json(self.path, data)
