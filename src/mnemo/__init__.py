"""mnemo: spaced-repetition scheduling for flashcards."""

__version__ = "0.3.0"
