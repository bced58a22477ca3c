"""Missed-word aggregation for end-of-game review.

For each category a player was shown but never answered, the report carries
one example answer, in the order the categories were played. It also carries
one grand-category hint word, which is always present: when no theme or word
can be found it is the ``NO_WORD`` placeholder.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import GameNotFinished, HistoryUnavailable, InvalidInput, NotFound
from .models import NO_WORD, GrandCategorySuggestion, MissedWordItem, MissedWordsReport, PlayTurn
from .suggestions import TaxonomyWordSuggester, WordSuggester
from .taxonomy import CategoryTaxonomy, default_taxonomy
from .text import category_key, normalize_word

if TYPE_CHECKING:
    from src.history.store import PlayHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_GRAND_WORD = NO_WORD
DEFAULT_HISTORY_TIMEOUT = 10.0


def collect_missed_turns(turns: Sequence[PlayTurn], exclude: str | None = None) -> list[PlayTurn]:
    """Turns whose category never received an accepted answer.

    A category answered in any turn is not missed. Each missed category appears
    once, at its first presentation, so the output keeps play order.
    ``exclude`` (the room's base category) is never reported.
    """
    answered = {category_key(t.category) for t in turns if t.was_answered}
    skipped = {category_key(exclude)} if exclude else set()

    missed: list[PlayTurn] = []
    seen: set[str] = set()
    for turn in turns:
        key = category_key(turn.category)
        if key in answered or key in skipped or key in seen:
            continue
        seen.add(key)
        missed.append(turn)
    return missed


def _starting_letter(example: str | None, turn: PlayTurn) -> str:
    folded = normalize_word(example or "")
    if folded:
        return folded[0].upper()
    return turn.required_letter.strip().upper()


async def build_missed_words_report(
    turns: Sequence[PlayTurn],
    *,
    base_category: str | None = None,
    collected_letters: Sequence[str] = (),
    suggester: WordSuggester | None = None,
    taxonomy: CategoryTaxonomy | None = None,
) -> MissedWordsReport:
    """Build the report from a player's turns, without touching any store."""
    suggester = suggester or TaxonomyWordSuggester(taxonomy)
    taxonomy = taxonomy or default_taxonomy

    missed = collect_missed_turns(turns, exclude=base_category)

    examples: list[str | None] = [None] * len(missed)
    if missed:
        try:
            suggested = await suggester.example_words(missed)
        except Exception as e:
            logger.warning(f"Example word suggestion failed, using placeholders: {e}")
        else:
            if len(suggested) == len(missed):
                examples = list(suggested)
            else:
                logger.warning(f"Suggester returned {len(suggested)} examples for {len(missed)} categories, using placeholders")

    missed_words = [
        MissedWordItem(
            category=turn.category,
            example_word=example or NO_WORD,
            starting_letter=_starting_letter(example, turn),
        )
        for turn, example in zip(missed, examples)
    ]

    theme = base_category.strip() if base_category and base_category.strip() else None
    if theme is None and missed:
        theme = taxonomy.common_theme(turn.category for turn in missed)

    grand_word: str | None = None
    if theme:
        try:
            grand_word = await suggester.grand_word(theme, list(collected_letters))
        except Exception as e:
            logger.warning(f"Grand category suggestion failed for {theme!r}: {e}")
    if not grand_word or normalize_word(grand_word) in ("", normalize_word(DEFAULT_GRAND_WORD)):
        logger.info(f"No grand category word for theme {theme!r}, using {DEFAULT_GRAND_WORD!r}")
        grand_word = DEFAULT_GRAND_WORD
        theme = None

    return MissedWordsReport(
        missed_words=missed_words,
        grand_category_suggestion=GrandCategorySuggestion(word=grand_word.strip(), category=theme),
    )


async def get_missed_words(
    room_code: str,
    player_id: str,
    *,
    store: PlayHistoryStore,
    suggester: WordSuggester | None = None,
    taxonomy: CategoryTaxonomy | None = None,
    timeout: float = DEFAULT_HISTORY_TIMEOUT,
) -> MissedWordsReport:
    """Missed words and a grand-category hint for a player in a finished room.

    Raises:
        InvalidInput: Blank room code or player id
        GameNotFinished: The room is still in play
        NotFound: Unknown room, or player not in the room
        HistoryUnavailable: The history lookup failed or timed out
    """
    if not isinstance(room_code, str) or not room_code.strip():
        raise InvalidInput("Room code is required")
    if not isinstance(player_id, str) or not player_id.strip():
        raise InvalidInput("Player id is required")

    try:
        room = await asyncio.wait_for(store.get_room(room_code), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise HistoryUnavailable(f"History lookup for room {room_code!r} timed out after {timeout}s") from e
    except OSError as e:
        raise HistoryUnavailable(f"History lookup for room {room_code!r} failed: {e}") from e

    if room is None:
        raise NotFound("Room not found")
    player = room.players.get(player_id.strip())
    if player is None:
        raise NotFound("Player not found in this room")
    if room.status != "finished":
        raise GameNotFinished("Game is not finished yet")

    logger.info(f"Aggregating missed words for player {player_id!r} in room {room.room_code!r} ({len(player.turns)} turns)")
    return await build_missed_words_report(
        player.turns,
        base_category=room.base_category,
        collected_letters=player.collected_letters,
        suggester=suggester,
        taxonomy=taxonomy,
    )
