"""Strict word validation.

Checks run in a fixed order and the first failing check decides the outcome:

1. already used in this round     -> ALREADY_USED
2. first letter not allowed       -> WRONG_LETTER
3. not shaped like a word         -> NOT_IN_CATEGORY
4. no category membership found   -> NOT_IN_CATEGORY

Validation never mutates its inputs; the caller commits an accepted word to
its used-word set.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator, Sequence

from .errors import InvalidInput, LookupUnavailable
from .membership import CategoryMembership, StaticCategoryMembership
from .models import RejectionReason, ValidationResult
from .text import is_word_shaped, normalize_word

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3
DEFAULT_LOOKUP_TIMEOUT = 10.0

_default_membership = StaticCategoryMembership()


class UsedWordSet:
    """Set of claimed words that never holds two spellings of the same word.

    Membership and insertion compare trimmed, lower-cased, accent-stripped
    forms, so "Elephant", " elephant " and "ÉLEPHANT" are one entry.
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words: dict[str, str] = {}
        for word in words:
            self.add(word)

    def add(self, word: str) -> bool:
        """Add a word; returns False if it was already present."""
        key = normalize_word(word)
        if not key or key in self._words:
            return False
        self._words[key] = word.strip()
        return True

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_word(word) in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words.values())

    def __len__(self) -> int:
        return len(self._words)


def _normalize_letters(allowed_letters: Iterable[str] | None) -> set[str]:
    letters: set[str] = set()
    for letter in allowed_letters or ():
        if not isinstance(letter, str) or len(letter.strip()) != 1:
            raise InvalidInput(f"Allowed letters must be single characters, got {letter!r}")
        letters.add(normalize_word(letter))
    if not letters:
        raise InvalidInput("At least one allowed letter is required")
    return letters


async def validate_word_strict(
    word: str,
    category: str,
    category_tags: Sequence[str] | None = None,
    allowed_letters: Iterable[str] | None = None,
    used_words: Iterable[str] | None = None,
    *,
    membership: CategoryMembership | None = None,
    timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> ValidationResult:
    """Decide whether ``word`` is an acceptable answer.

    Args:
        word: The submitted word, as typed
        category: Category the word must belong to
        category_tags: Secondary descriptors that broaden matching
        allowed_letters: Letters the word may start with (case-insensitive)
        used_words: Words already claimed this round (case-insensitive)
        membership: Category judge; defaults to the built-in category table
        timeout: Seconds allowed for the membership lookup

    Returns:
        ValidationResult with ``accepted`` and the deciding ``reason``

    Raises:
        InvalidInput: Empty word or category, or empty/malformed allowed letters
        LookupUnavailable: The membership lookup failed or timed out
    """
    if not isinstance(word, str) or not word.strip():
        raise InvalidInput("Word is required")
    if not isinstance(category, str) or not category.strip():
        raise InvalidInput("Category is required")
    letters = _normalize_letters(allowed_letters)
    tags = [t.strip() for t in (category_tags or ()) if t and t.strip()]

    original = word.strip()
    normalized = original.lower()
    folded = normalize_word(original)
    if not folded:
        raise InvalidInput("Word is required")

    def reject(reason: RejectionReason, detail: str) -> ValidationResult:
        logger.info(f"Word {normalized!r} rejected ({reason.value}): {detail}")
        return ValidationResult(
            accepted=False,
            reason=reason,
            normalized_word=normalized,
            word=original,
            detail=detail,
        )

    used = used_words if isinstance(used_words, UsedWordSet) else UsedWordSet(used_words or ())
    if folded in used:
        return reject(RejectionReason.ALREADY_USED, "Word already used in this category")

    if folded[0] not in letters:
        return reject(RejectionReason.WRONG_LETTER, "Must start with one of the allowed letters")

    if not is_word_shaped(folded):
        return reject(RejectionReason.NOT_IN_CATEGORY, "Contains invalid characters (only letters and spaces allowed)")
    if len(folded) < MIN_WORD_LENGTH:
        return reject(RejectionReason.NOT_IN_CATEGORY, f"Word is too short (minimum {MIN_WORD_LENGTH} characters)")

    judge = membership or _default_membership
    try:
        fits = await asyncio.wait_for(judge.contains(folded, category.strip(), tags), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise LookupUnavailable(f"Category lookup for {normalized!r} timed out after {timeout}s") from e

    if not fits:
        return reject(RejectionReason.NOT_IN_CATEGORY, f"Does not fit the category {category.strip()!r}")

    logger.info(f"Word {normalized!r} accepted for {category.strip()!r}")
    return ValidationResult(
        accepted=True,
        reason=RejectionReason.VALID,
        normalized_word=normalized,
        word=original,
    )
