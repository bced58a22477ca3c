"""Category membership judges.

A judge answers one question: does ``word`` belong to ``category`` (or to one
of its tags)? The validator only depends on the ``CategoryMembership``
interface, so the knowledge source can be a static table, an LLM, or a
combination without touching the order of validation checks.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import httpx

from src.core import LLMProvider, parse_verdict
from .errors import LookupUnavailable
from .taxonomy import CategoryTaxonomy, default_taxonomy
from .text import category_key, normalize_word

logger = logging.getLogger(__name__)


STRICT_JUDGE_PROMPT = """You are a strict validation engine for a competitive multiplayer word game.
Your job is to decide whether a submitted answer is ACCEPTED or REJECTED.
You must prioritize FAIRNESS, CONSISTENCY, and COMPETITIVE INTEGRITY.
When uncertain, you must REJECT rather than accept.

RULES:

1) STARTING LETTER and STRUCTURE were already checked before this step.

2) SPELLING ACCURACY (VERY STRICT)
Accept only correct standard spellings or widely accepted alternative spellings.
Do not accept phonetic guesses, slang spellings, extra or missing letters, or typos.

3) WORD RECOGNITION
The word must exist in at least one recognized source and be commonly recognizable:
dictionaries, well-known places, widely known figures, real brands (if the category allows).
Reject extremely obscure words and specialized jargon.

4) CATEGORY FIT (STRICT, NON-METAPHORICAL)
The word must clearly and directly fit the category.
Metaphorical, poetic or stretched associations are rejected.
If reasonable players could debate it, reject it.

5) FICTIONAL CONTENT
Fictional characters, places or entities are allowed only if the category tags include
'fictional' or the category explicitly mentions fiction.

6) REGIONAL AND TRANSLITERATED WORDS
Regional or transliterated words (for example Indian food words such as "samosa" or
Indian-English words such as "tiffin") are allowed only if the category or its tags
name that region. Prefer modern, widely recognized English spellings.

7) AMBIGUITY
The most common meaning of the word must fit the category. If the word only fits
through an uncommon meaning, or needs a qualifier to fit, reject it.

8) CONFIDENCE
If your confidence is not high, reject. Favor false negatives over false positives.

RESPONSE FORMAT:
Respond with ONLY a single word: "ACCEPT" or "REJECT".
Do not include any explanation, punctuation, or additional text."""


class CategoryMembership(ABC):
    """Capability: does a word belong to a category or one of its tags?"""

    @abstractmethod
    async def contains(self, word: str, category: str, tags: Sequence[str] = ()) -> bool:
        """Return True if there is evidence that ``word`` fits the category."""
        pass


class StaticCategoryMembership(CategoryMembership):
    """Membership backed by the built-in category table.

    A word fits if it is listed under the category, under any tag that names a
    known category, or under any of their sub-categories.
    """

    def __init__(self, taxonomy: CategoryTaxonomy | None = None):
        self.taxonomy = taxonomy or default_taxonomy

    async def contains(self, word: str, category: str, tags: Sequence[str] = ()) -> bool:
        return any(self.taxonomy.contains(word, name) for name in (category, *tags))


class LLMCategoryMembership(CategoryMembership):
    """Membership judged by an LLM with the strict ACCEPT/REJECT prompt.

    Provider failures are raised as ``LookupUnavailable`` so that a broken
    judge is never mistaken for a wrong answer.
    """

    def __init__(self, provider: LLMProvider, temperature: float = 0.0):
        self.provider = provider
        self.temperature = temperature

    def build_messages(self, word: str, category: str, tags: Sequence[str] = ()) -> list[dict[str, str]]:
        tags_info = f"\nCategory Tags: {', '.join(tags)}" if tags else ""
        return [
            {"role": "system", "content": STRICT_JUDGE_PROMPT},
            {
                "role": "user",
                "content": (
                    f'Category: "{category}"{tags_info}\n'
                    f'Submitted word: "{word}"\n\n'
                    "Is this word ACCEPTED or REJECTED?"
                ),
            },
        ]

    async def contains(self, word: str, category: str, tags: Sequence[str] = ()) -> bool:
        messages = self.build_messages(word, category, tags)
        try:
            response = await self.provider.complete(messages, temperature=self.temperature, max_tokens=10)
        except (RuntimeError, ValueError, httpx.HTTPError) as e:
            raise LookupUnavailable(f"Category judge unavailable: {e}") from e

        accepted = parse_verdict(response.content)
        logger.info(f"LLM verdict for {word!r} in {category!r}: {response.content!r} -> accepted={accepted}")
        return accepted


@dataclass
class _CacheEntry:
    value: bool
    stored_at: float


class CachedCategoryMembership(CategoryMembership):
    """Wraps another judge with manual overrides and a TTL cache.

    Overrides are checked first and always win. Verdicts from the wrapped judge
    are cached per (category, tags, word) for ``ttl_seconds``; failures are
    not cached. Overrides apply to a word in a category whatever the tags.
    """

    def __init__(
        self,
        inner: CategoryMembership,
        ttl_seconds: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[tuple[str, tuple[str, ...], str], _CacheEntry] = {}
        self._overrides: dict[tuple[str, str], bool] = {}

    @staticmethod
    def _key(word: str, category: str) -> tuple[str, str]:
        return category_key(category), normalize_word(word)

    @staticmethod
    def _cache_key(word: str, category: str, tags: Sequence[str]) -> tuple[str, tuple[str, ...], str]:
        tag_keys = tuple(sorted({key for key in map(category_key, tags) if key}))
        return category_key(category), tag_keys, normalize_word(word)

    def add_override(self, word: str, category: str, valid: bool) -> None:
        """Force a verdict for a word in a category (manual review)."""
        self._overrides[self._key(word, category)] = valid

    def remove_override(self, word: str, category: str) -> None:
        self._overrides.pop(self._key(word, category), None)

    def clear(self) -> None:
        """Drop cached verdicts; overrides are kept."""
        self._cache.clear()

    async def contains(self, word: str, category: str, tags: Sequence[str] = ()) -> bool:
        override = self._overrides.get(self._key(word, category))
        if override is not None:
            logger.info(f"Manual override for {word!r} in {category!r}: {'VALID' if override else 'INVALID'}")
            return override

        key = self._cache_key(word, category, tags)
        entry = self._cache.get(key)
        if entry is not None:
            if self._clock() - entry.stored_at < self.ttl_seconds:
                logger.debug(f"Cache hit for {word!r} in {category!r}")
                return entry.value
            del self._cache[key]

        value = await self.inner.contains(word, category, tags)
        self._cache[key] = _CacheEntry(value=value, stored_at=self._clock())
        return value


class ChainedCategoryMembership(CategoryMembership):
    """Asks several judges in order and accepts on the first positive answer."""

    def __init__(self, judges: Sequence[CategoryMembership]):
        if not judges:
            raise ValueError("ChainedCategoryMembership needs at least one judge")
        self.judges = list(judges)

    async def contains(self, word: str, category: str, tags: Sequence[str] = ()) -> bool:
        for judge in self.judges:
            if await judge.contains(word, category, tags):
                return True
        return False
