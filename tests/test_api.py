"""Tests for the HTTP API."""

import asyncio
import pytest
from pathlib import Path

from fastapi.testclient import TestClient

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api import AppSettings, build_membership, build_suggester, create_app
from src.core import MockProvider
from src.engine import (
    CachedCategoryMembership, CategoryMembership, ChainedCategoryMembership,
    LLMWordSuggester, PlayerHistory, PlayTurn, RoomHistory, StaticCategoryMembership,
    TaxonomyWordSuggester,
)
from src.history import InMemoryHistoryStore, JsonHistoryStore, PlayHistoryStore


class DownMembership(CategoryMembership):
    async def contains(self, word, category, tags=()):
        await asyncio.sleep(5)
        return True


class DownStore(PlayHistoryStore):
    async def get_room(self, room_code):
        raise OSError("connection reset")

    async def save_room(self, room):
        pass


def make_rooms():
    turns = [
        PlayTurn(category="Animals", required_letter="A", was_answered=True),
        PlayTurn(category="Birds", required_letter="P"),
        PlayTurn(category="Fruits", required_letter="B"),
    ]
    return [
        RoomHistory(
            room_code="ROOM1",
            status="finished",
            players={"p1": PlayerHistory(player_id="p1", turns=turns, collected_letters=["C", "A", "T"])},
        ),
        RoomHistory(
            room_code="LIVE",
            status="active",
            players={"p1": PlayerHistory(player_id="p1", turns=turns)},
        ),
    ]


@pytest.fixture
def client():
    app = create_app(AppSettings(), store=InMemoryHistoryStore(make_rooms()))
    return TestClient(app)


# ============================================================================
# Validation Endpoint Tests
# ============================================================================

class TestValidateWordEndpoint:

    def test_accepts_word(self, client):
        response = client.post("/validate-word", json={
            "word": "Elephant",
            "category": "Animals",
            "categoryTags": [],
            "allowedLetters": ["E", "F"],
            "usedWords": [],
        })

        assert response.status_code == 200
        assert response.json() == {
            "accepted": True,
            "reason": "VALID",
            "normalizedWord": "elephant",
            "word": "Elephant",
            "detail": None,
        }

    def test_rejection_is_not_an_error(self, client):
        response = client.post("/validate-word", json={
            "word": "zebra",
            "category": "Animals",
            "allowedLetters": ["E"],
        })

        assert response.status_code == 200
        assert response.json()["reason"] == "WRONG_LETTER"
        assert response.json()["accepted"] is False

    def test_already_used(self, client):
        response = client.post("/validate-word", json={
            "word": "Eagle",
            "category": "Birds",
            "allowedLetters": ["E"],
            "usedWords": ["EAGLE"],
        })

        assert response.json()["reason"] == "ALREADY_USED"

    def test_missing_fields_rejected_by_schema(self, client):
        response = client.post("/validate-word", json={"word": "Elephant", "category": "Animals"})

        assert response.status_code == 422

    def test_empty_letters_rejected_by_schema(self, client):
        response = client.post("/validate-word", json={
            "word": "Elephant", "category": "Animals", "allowedLetters": [],
        })

        assert response.status_code == 422

    def test_blank_word_is_bad_request(self, client):
        response = client.post("/validate-word", json={
            "word": "   ", "category": "Animals", "allowedLetters": ["E"],
        })

        assert response.status_code == 400
        assert "detail" in response.json()

    def test_judge_timeout_is_service_unavailable(self):
        settings = AppSettings(lookup_timeout=0.01)
        app = create_app(settings, membership=DownMembership(), store=InMemoryHistoryStore())

        response = TestClient(app).post("/validate-word", json={
            "word": "Elephant", "category": "Animals", "allowedLetters": ["E"],
        })

        assert response.status_code == 503
        assert "timed out" in response.json()["detail"]


# ============================================================================
# Missed Words Endpoint Tests
# ============================================================================

class TestRoomMissedWordsEndpoint:

    def test_report(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "room1", "playerId": "p1"})

        assert response.status_code == 200
        data = response.json()
        assert data["missedWords"] == [
            {"category": "Birds", "exampleWord": "parrot", "startingLetter": "P"},
            {"category": "Fruits", "exampleWord": "banana", "startingLetter": "B"},
        ]
        assert data["grandCategorySuggestion"] == {"word": "No word", "category": None}

    def test_unknown_room(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "NOPE", "playerId": "p1"})

        assert response.status_code == 404
        assert response.json() == {"detail": "Room not found"}

    def test_unknown_player(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "ROOM1", "playerId": "p9"})

        assert response.status_code == 404
        assert response.json() == {"detail": "Player not found in this room"}

    def test_game_not_finished(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "LIVE", "playerId": "p1"})

        assert response.status_code == 400

    def test_missing_params(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "ROOM1"})

        assert response.status_code == 422

    def test_invalid_room_code(self, client):
        response = client.get("/room/missed-words", params={"roomCode": "../x", "playerId": "p1"})

        assert response.status_code == 400

    def test_store_down(self):
        app = create_app(AppSettings(), store=DownStore())

        response = TestClient(app).get("/room/missed-words", params={"roomCode": "ROOM1", "playerId": "p1"})

        assert response.status_code == 503

    def test_corrupt_room_file(self, tmp_path):
        store = JsonHistoryStore(tmp_path)
        store.ensure_storage()
        (tmp_path / "rooms" / "ROOM1.json").write_text('{"roomCode": "ROOM1", "players": 7}')
        app = create_app(AppSettings(), store=store)

        response = TestClient(app).get("/room/missed-words", params={"roomCode": "ROOM1", "playerId": "p1"})

        assert response.status_code == 503
        assert "ROOM1.json" in response.json()["detail"]


class TestSoloMissedWordsEndpoint:

    def test_report(self, client):
        response = client.post("/solo/missed-words", json={
            "baseCategory": "Animals",
            "collectedLetters": ["C", "A", "T"],
            "categoriesPlayed": [
                {"category": "Animals", "letters": ["A"]},
                {"category": "Birds", "letters": ["X", "O"]},
                {"category": "Pets", "letters": ["D"], "wasAnswered": True},
            ],
        })

        assert response.status_code == 200
        assert response.json() == {
            "missedWords": [{"category": "Birds", "exampleWord": "ostrich", "startingLetter": "O"}],
            "grandCategorySuggestion": {"word": "cat", "category": "Animals"},
        }

    def test_multi_character_letter_rejected(self, client):
        response = client.post("/solo/missed-words", json={
            "categoriesPlayed": [{"category": "Birds", "letters": ["XY"]}],
        })

        assert response.status_code == 422

    def test_empty_game(self, client):
        response = client.post("/solo/missed-words", json={})

        assert response.status_code == 200
        assert response.json()["missedWords"] == []
        assert response.json()["grandCategorySuggestion"]["word"] == "No word"


# ============================================================================
# Misc Endpoint Tests
# ============================================================================

class TestMiscEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_categories(self, client):
        groups = client.get("/categories").json()["grandCategories"]

        animals = next(group for group in groups if group["name"] == "Animals")
        assert "Birds" in animals["subcategories"]
        assert len(groups) == 12


# ============================================================================
# Settings Tests
# ============================================================================

class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("WORDGAME_MEMBERSHIP", "WORDGAME_LOOKUP_TIMEOUT", "WORDGAME_CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        settings = AppSettings.from_env()

        assert settings.membership == "static"
        assert settings.lookup_timeout == 10.0
        assert settings.cors_origins == ["*"]

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WORDGAME_MEMBERSHIP", "chained")
        monkeypatch.setenv("WORDGAME_LOOKUP_TIMEOUT", "2.5")
        monkeypatch.setenv("WORDGAME_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("WORDGAME_CORS_ORIGINS", "http://localhost:3000, https://game.example")

        settings = AppSettings.from_env()

        assert settings.membership == "chained"
        assert settings.lookup_timeout == 2.5
        assert settings.get_data_path() == tmp_path
        assert settings.cors_origins == ["http://localhost:3000", "https://game.example"]

    def test_bad_mode_rejected(self, monkeypatch):
        monkeypatch.setenv("WORDGAME_MEMBERSHIP", "oracle")

        with pytest.raises(ValueError):
            AppSettings.from_env()

    def test_membership_modes(self):
        provider = MockProvider(responses=["ACCEPT"])

        assert isinstance(build_membership(AppSettings()), StaticCategoryMembership)
        assert isinstance(build_membership(AppSettings(membership="llm"), provider), CachedCategoryMembership)
        assert isinstance(build_membership(AppSettings(membership="chained"), provider), ChainedCategoryMembership)

    def test_suggester_modes(self):
        assert isinstance(build_suggester(AppSettings()), TaxonomyWordSuggester)
        suggester = build_suggester(AppSettings(suggester="llm"), MockProvider())
        assert isinstance(suggester, LLMWordSuggester)
        assert isinstance(suggester.fallback, TaxonomyWordSuggester)

    def test_default_store_is_json(self, tmp_path):
        app = create_app(AppSettings(data_dir=str(tmp_path)))

        assert isinstance(app.state.store, JsonHistoryStore)
        assert app.state.store.base_dir == tmp_path
