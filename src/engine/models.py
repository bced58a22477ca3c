"""Data models for the word game engines."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Placeholder used when no example or grand-category word is available.
NO_WORD = "No word"


class WireModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RejectionReason(str, Enum):
    """Outcome of a word validation."""
    VALID = "VALID"
    ALREADY_USED = "ALREADY_USED"
    WRONG_LETTER = "WRONG_LETTER"
    NOT_IN_CATEGORY = "NOT_IN_CATEGORY"


class ValidationResult(WireModel):
    """Decision for one submitted word."""
    accepted: bool
    reason: RejectionReason
    normalized_word: str
    word: str = ""  # Trimmed, original casing
    detail: str | None = None  # Human-readable feedback for the UI


class PlayTurn(WireModel):
    """One category presented to a player during a game."""
    category: str = Field(min_length=1)
    required_letter: str = Field(min_length=1)
    was_answered: bool = False
    letters: list[str] = Field(default_factory=list)  # All letters offered that round

    def candidate_letters(self) -> list[str]:
        """Letters an answer could have started with, required letter first."""
        out: list[str] = []
        for letter in (self.required_letter, *self.letters):
            letter = letter.strip().upper()
            if letter and letter not in out:
                out.append(letter)
        return out


class PlayerHistory(WireModel):
    """A player's turns within a room, in the order they were played."""
    player_id: str
    turns: list[PlayTurn] = Field(default_factory=list)
    collected_letters: list[str] = Field(default_factory=list)


RoomStatus = Literal["waiting", "active", "finished"]


class RoomHistory(WireModel):
    """Snapshot of a room's play history."""
    room_code: str
    status: RoomStatus = "finished"
    base_category: str | None = None
    players: dict[str, PlayerHistory] = Field(default_factory=dict)


class MissedWordItem(WireModel):
    """A category the player failed to answer, with an example answer."""
    category: str
    example_word: str
    starting_letter: str


class GrandCategorySuggestion(WireModel):
    """A single hint word for the theme spanning the missed categories."""
    word: str = Field(min_length=1)
    category: str | None = None  # Theme the word was drawn from, if any


class MissedWordsReport(WireModel):
    """Aggregated missed words for one player."""
    missed_words: list[MissedWordItem] = Field(default_factory=list)
    grand_category_suggestion: GrandCategorySuggestion
