"""Request-level failures raised by the word game engines.

Rejections (already used, wrong letter, not in category) are not errors; they
come back as a normal ``ValidationResult`` with ``accepted=False``.
"""

from __future__ import annotations


class WordGameError(Exception):
    """Base class for engine failures surfaced to the caller."""


class InvalidInput(WordGameError):
    """Malformed or empty request fields."""


class LookupUnavailable(InvalidInput):
    """The category knowledge source failed or timed out."""


class GameNotFinished(InvalidInput):
    """Missed words were requested for a room that is still in play."""


class NotFound(WordGameError):
    """Unknown room, or player not in the room."""


class HistoryUnavailable(NotFound):
    """The play history store failed or timed out."""
