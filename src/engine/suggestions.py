"""Example-word and grand-category-word suggesters for the missed-words report."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence

import httpx

from src.core import LLMProvider, extract_item_list, extract_json_payload
from .models import NO_WORD, PlayTurn
from .taxonomy import CategoryTaxonomy, default_taxonomy
from .text import category_key, normalize_word

logger = logging.getLogger(__name__)


def can_spell(word: str, letters: Sequence[str]) -> bool:
    """True if ``word`` can be spelled using each of ``letters`` at most once.

    Spaces in the word are ignored; letters compare case-insensitively.

    Examples:
        >>> can_spell("cat", ["T", "A", "C", "X"])
        True
        >>> can_spell("otter", ["O", "T", "E", "R"])
        False
    """
    needed = Counter(normalize_word(word).replace(" ", ""))
    available = Counter(normalize_word(letter) for letter in letters)
    return all(available[ch] >= count for ch, count in needed.items())


def _is_placeholder(word: str | None) -> bool:
    return not word or normalize_word(word) == normalize_word(NO_WORD)


class WordSuggester(ABC):
    """Capability: propose example answers and grand-category hint words."""

    @abstractmethod
    async def example_words(self, turns: Sequence[PlayTurn]) -> list[str | None]:
        """One example word per turn, fitting its category and starting with
        one of its candidate letters; None where no word is known."""
        pass

    @abstractmethod
    async def grand_word(self, theme: str, collected_letters: Sequence[str] = ()) -> str | None:
        """A word in ``theme``, spelled from ``collected_letters`` when any are given."""
        pass


class TaxonomyWordSuggester(WordSuggester):
    """Suggestions drawn from the built-in category table."""

    def __init__(self, taxonomy: CategoryTaxonomy | None = None):
        self.taxonomy = taxonomy or default_taxonomy

    async def example_words(self, turns: Sequence[PlayTurn]) -> list[str | None]:
        results: list[str | None] = []
        for turn in turns:
            word = None
            for letter in turn.candidate_letters():
                word = self.taxonomy.example_word(turn.category, letter)
                if word:
                    break
            results.append(word)
        return results

    async def grand_word(self, theme: str, collected_letters: Sequence[str] = ()) -> str | None:
        for word in self.taxonomy.words_in(theme):
            if not collected_letters or can_spell(word, collected_letters):
                return word
        return None


class LLMWordSuggester(WordSuggester):
    """Suggestions from an LLM returning JSON, with an optional fallback suggester.

    A failed call or an unparseable reply yields None for the affected entries
    (or the fallback's answer), never an exception.
    """

    def __init__(
        self,
        provider: LLMProvider,
        fallback: WordSuggester | None = None,
        temperature: float = 0.3,
    ):
        self.provider = provider
        self.fallback = fallback
        self.temperature = temperature

    def build_example_messages(self, turns: Sequence[PlayTurn]) -> list[dict[str, str]]:
        categories_with_letters = [
            {"category": turn.category, "letters": turn.candidate_letters()}
            for turn in turns
        ]
        prompt = f"""I have a word game with multiple categories. For EACH category, I will provide the specific letters that were available when that category was played.

Here are the categories with their available letters:
{json.dumps(categories_with_letters)}

For EACH category in the list, you MUST provide EXACTLY ONE entry in your response. For each category:
1. Find a single common English word that fits the category perfectly AND starts with one of that category's specific available letters (case-insensitive).
2. If NO valid word exists that both fits the category AND starts with one of that category's available letters, return "{NO_WORD}" as the exampleWord.
3. The word must be a common, recognizable word (no obscure words).

You MUST return EXACTLY {len(turns)} entries in your response - one for each category provided.

Return the result as a JSON object with a "words" key containing an array of objects with keys: "category", "exampleWord", "startingLetter".

Example format:
{{"words": [{{"category": "Animals", "exampleWord": "Cat", "startingLetter": "C"}}]}}"""
        return [
            {
                "role": "system",
                "content": "You are a helpful assistant for a word game. You output only valid JSON. "
                           "You MUST provide exactly one entry per category requested.",
            },
            {"role": "user", "content": prompt},
        ]

    def build_grand_messages(self, theme: str, collected_letters: Sequence[str]) -> list[dict[str, str]]:
        if collected_letters:
            letters_rule = (
                f"1. Can be formed using ONLY these collected letters: {json.dumps(list(collected_letters))} "
                "(each letter at most once, not all letters need to be used).\n"
            )
        else:
            letters_rule = "1. Is a single word (no letter restriction).\n"
        prompt = f"""Please find ONE common English word that:
{letters_rule}2. Fits the grand category "{theme}" perfectly.
3. Is a common, recognizable word (no obscure words).

If NO valid word exists, return "{NO_WORD}".

Return the result as a JSON object with a "word" key, for example {{"word": "Cat"}}."""
        return [
            {"role": "system", "content": "You are a helpful assistant for a word game. You output only valid JSON."},
            {"role": "user", "content": prompt},
        ]

    async def _ask(self, messages: list[dict[str, str]]) -> str | None:
        try:
            response = await self.provider.complete(
                messages,
                temperature=self.temperature,
                max_tokens=1024,
                response_format={"type": "json_object"},
            )
        except (RuntimeError, ValueError, httpx.HTTPError) as e:
            logger.warning(f"Word suggestion request failed: {e}")
            return None
        return response.content

    async def example_words(self, turns: Sequence[PlayTurn]) -> list[str | None]:
        if not turns:
            return []

        found: dict[str, str] = {}
        content = await self._ask(self.build_example_messages(turns))
        payload = extract_json_payload(content) if content else None
        if content and payload is None:
            logger.warning(f"Could not parse example words from response: {content[:200]!r}")

        for item in extract_item_list(payload):
            if not isinstance(item, dict):
                continue
            category = item.get("category")
            word = item.get("exampleWord")
            if isinstance(category, str) and isinstance(word, str) and not _is_placeholder(word):
                found.setdefault(category_key(category), word.strip())

        results: list[str | None] = []
        for turn in turns:
            word = found.get(category_key(turn.category))
            letters = turn.candidate_letters()
            if word and not any(normalize_word(word).startswith(normalize_word(l)) for l in letters):
                logger.warning(f"Discarding example {word!r} for {turn.category!r}: does not start with any of {letters}")
                word = None
            results.append(word)

        if self.fallback and any(word is None for word in results):
            fallback_words = await self.fallback.example_words(turns)
            results = [word or alt for word, alt in zip(results, fallback_words)]
        return results

    async def grand_word(self, theme: str, collected_letters: Sequence[str] = ()) -> str | None:
        content = await self._ask(self.build_grand_messages(theme, collected_letters))
        payload = extract_json_payload(content) if content else None

        word = None
        if isinstance(payload, dict) and isinstance(payload.get("word"), str):
            word = payload["word"].strip()
        if _is_placeholder(word):
            word = None
        elif collected_letters and not can_spell(word, collected_letters):
            logger.warning(f"Discarding grand word {word!r}: not spelled from collected letters")
            word = None

        if word is None and self.fallback:
            return await self.fallback.grand_word(theme, collected_letters)
        return word
