from .errors import (
    WordGameError, InvalidInput, LookupUnavailable, GameNotFinished,
    NotFound, HistoryUnavailable,
)
from .models import NO_WORD, RejectionReason, ValidationResult, PlayTurn, PlayerHistory
from .models import RoomHistory, MissedWordItem, GrandCategorySuggestion, MissedWordsReport
from .text import normalize_accents, normalize_word
from .taxonomy import CategoryTaxonomy, default_taxonomy
from .membership import (
    CategoryMembership, StaticCategoryMembership, LLMCategoryMembership,
    CachedCategoryMembership, ChainedCategoryMembership,
)
from .validator import UsedWordSet, validate_word_strict
from .suggestions import WordSuggester, TaxonomyWordSuggester, LLMWordSuggester, can_spell
from .aggregator import (
    DEFAULT_GRAND_WORD, collect_missed_turns, build_missed_words_report, get_missed_words,
)

__all__ = [
    "WordGameError", "InvalidInput", "LookupUnavailable", "GameNotFinished",
    "NotFound", "HistoryUnavailable",
    "NO_WORD", "RejectionReason", "ValidationResult", "PlayTurn", "PlayerHistory",
    "RoomHistory", "MissedWordItem", "GrandCategorySuggestion", "MissedWordsReport",
    "normalize_accents", "normalize_word",
    "CategoryTaxonomy", "default_taxonomy",
    "CategoryMembership", "StaticCategoryMembership", "LLMCategoryMembership",
    "CachedCategoryMembership", "ChainedCategoryMembership",
    "UsedWordSet", "validate_word_strict",
    "WordSuggester", "TaxonomyWordSuggester", "LLMWordSuggester", "can_spell",
    "DEFAULT_GRAND_WORD", "collect_missed_turns", "build_missed_words_report", "get_missed_words",
]
