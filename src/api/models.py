"""Request/response models for the word game API."""
from __future__ import annotations

from typing import Annotated

from pydantic import Field

from src.engine import PlayTurn
from src.engine.models import WireModel

Letter = Annotated[str, Field(min_length=1, max_length=1)]


class ValidateWordRequest(WireModel):
    word: str = Field(min_length=1)
    category: str = Field(min_length=1)
    category_tags: list[str] = Field(default_factory=list)
    allowed_letters: list[str] = Field(min_length=1)
    used_words: list[str] = Field(default_factory=list)


class CategoryPlayed(WireModel):
    """A category from a solo game and the letters offered with it."""
    category: str = Field(min_length=1)
    letters: list[Letter] = Field(min_length=1)
    was_answered: bool = False

    def to_turn(self) -> PlayTurn:
        return PlayTurn(
            category=self.category,
            required_letter=self.letters[0],
            letters=self.letters,
            was_answered=self.was_answered,
        )


class SoloMissedWordsRequest(WireModel):
    base_category: str | None = None
    collected_letters: list[str] = Field(default_factory=list)
    categories_played: list[CategoryPlayed] = Field(default_factory=list)


class CategoryGroup(WireModel):
    name: str
    subcategories: list[str] = Field(default_factory=list)


class CategoriesResponse(WireModel):
    grand_categories: list[CategoryGroup]


class ErrorResponse(WireModel):
    detail: str
