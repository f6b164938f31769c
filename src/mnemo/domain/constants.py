"""Centralized constants for mnemo.

All magic numbers and scheduling priors live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_SECOND = 1000
MS_PER_DAY = 24 * 60 * 60 * 1000

# ---------- Memory state priors ----------
MIN_DIFFICULTY = 0.1
MAX_DIFFICULTY = 0.9
MIN_STABILITY = 0.4
INITIAL_STABILITY = 2.4
INITIAL_DIFFICULTY = 0.3
INITIAL_EASE_FACTOR = 2.5

# ---------- Difficulty / stability steps ----------
DIFFICULTY_LAPSE_STEP = 0.15
DIFFICULTY_EASE_STEP = 0.1
FIRST_REVIEW_BONUS_STEP = 0.2
STABILITY_GROWTH_STEP = 0.15
STRUGGLED_STABILITY_FACTOR = 1.2
MIN_INTERVAL_DAYS = 1

# ---------- Quality ----------
MIN_QUALITY = 0
MAX_QUALITY = 5
CORRECT_QUALITY_THRESHOLD = 3  # quality >= 3 counts as a successful recall

# ---------- Priority ----------
OVERDUE_PRIORITY_WEIGHT = 100
STABILITY_PRIORITY_WEIGHT = 10

# ---------- Review Queue ----------
DEFAULT_MAX_NEW_CARDS_PER_DAY = 20
QUEUE_CONFIG_KEY = "review-queue-config"

# ---------- Card Status ----------
LEARNING_REVIEW_THRESHOLD = 3
MASTERED_STABILITY_THRESHOLD = 30.0

# ---------- Storage ----------
CURRENT_SCHEMA_VERSION = 2
DEFAULT_DECK_ID = "default"
CARD_ID_PREFIX = "card_"
