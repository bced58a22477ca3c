"""Tests for play history stores."""

import json
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine import HistoryUnavailable, InvalidInput, NotFound, PlayTurn, RoomHistory
from src.history import InMemoryHistoryStore, JsonHistoryStore, get_data_dir, normalize_room_code


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    """Both store implementations behave the same."""
    if request.param == "memory":
        return InMemoryHistoryStore()
    return JsonHistoryStore(tmp_path)


class TestRoomCodes:

    def test_upper_cased(self):
        assert normalize_room_code(" abc12 ") == "ABC12"

    @pytest.mark.parametrize("code", ["", "   ", "../etc", "has space", "x" * 65])
    def test_rejects_bad_codes(self, code):
        with pytest.raises(InvalidInput):
            normalize_room_code(code)


class TestHistoryStore:

    @pytest.mark.asyncio
    async def test_missing_room(self, store):
        assert await store.get_room("ROOM1") is None

    @pytest.mark.asyncio
    async def test_record_and_read_turns(self, store):
        await store.create_room("room1", base_category="Animals")
        await store.record_turn("ROOM1", "p1", PlayTurn(category="Birds", required_letter="P"))
        await store.record_turn("room1", "p1", PlayTurn(category="Pets", required_letter="D", was_answered=True))

        turns = await store.get_play_history("ROOM1", "p1")

        assert [(t.category, t.was_answered) for t in turns] == [("Birds", False), ("Pets", True)]

    @pytest.mark.asyncio
    async def test_room_lifecycle(self, store):
        room = await store.create_room("room1", base_category="Animals")
        assert room.status == "active"
        assert room.room_code == "ROOM1"

        await store.collect_letter("ROOM1", "p1", "c")
        await store.collect_letter("ROOM1", "p1", " a ")
        await store.finish_room("ROOM1")

        room = await store.get_room("room1")
        assert room.status == "finished"
        assert room.base_category == "Animals"
        assert room.players["p1"].collected_letters == ["C", "A"]

    @pytest.mark.asyncio
    async def test_snapshots_are_independent(self, store):
        await store.create_room("ROOM1")
        room = await store.get_room("ROOM1")
        room.status = "finished"

        assert (await store.get_room("ROOM1")).status == "active"

    @pytest.mark.asyncio
    async def test_unknown_room_and_player(self, store):
        with pytest.raises(NotFound, match="Room not found"):
            await store.get_play_history("ROOM1", "p1")
        with pytest.raises(NotFound):
            await store.record_turn("ROOM1", "p1", PlayTurn(category="Birds", required_letter="P"))

        await store.create_room("ROOM1")
        with pytest.raises(NotFound, match="Player not found"):
            await store.get_play_history("ROOM1", "p1")


class TestJsonHistoryStore:

    @pytest.mark.asyncio
    async def test_files_use_camel_case(self, tmp_path):
        store = JsonHistoryStore(tmp_path)
        await store.create_room("room1", base_category="Animals")
        await store.record_turn("ROOM1", "p1", PlayTurn(category="Birds", required_letter="P"))

        data = json.loads((tmp_path / "rooms" / "ROOM1.json").read_text())

        assert data["roomCode"] == "ROOM1"
        assert data["baseCategory"] == "Animals"
        assert data["players"]["p1"]["turns"][0]["requiredLetter"] == "P"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [
        b"{not json",
        b'{"roomCode": "ROOM1", "status": "paused"}',
        b'{"status": "finished"}',
        b"\xff\xfe\x00garbage",
    ])
    async def test_unreadable_room_file(self, tmp_path, content):
        """Corrupt or schema-invalid files surface as HistoryUnavailable."""
        store = JsonHistoryStore(tmp_path)
        store.ensure_storage()
        (tmp_path / "rooms" / "ROOM1.json").write_bytes(content)

        with pytest.raises(HistoryUnavailable) as exc_info:
            await store.get_room("ROOM1")

        assert isinstance(exc_info.value, NotFound)
        assert "ROOM1.json" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_survives_new_instance(self, tmp_path):
        await JsonHistoryStore(tmp_path).save_room(RoomHistory(room_code="abc"))

        room = await JsonHistoryStore(tmp_path).get_room("ABC")

        assert room is not None
        assert room.status == "finished"

    @pytest.mark.asyncio
    async def test_list_rooms(self, tmp_path):
        store = JsonHistoryStore(tmp_path)
        assert store.list_rooms() == []

        await store.create_room("beta")
        await store.create_room("alpha")

        assert store.list_rooms() == ["ALPHA", "BETA"]

    def test_data_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WORDGAME_DATA_DIR", str(tmp_path))
        assert get_data_dir() == tmp_path
        assert JsonHistoryStore().base_dir == tmp_path

    def test_default_data_dir(self, monkeypatch):
        monkeypatch.delenv("WORDGAME_DATA_DIR", raising=False)
        assert get_data_dir() == Path("wordgame_data")
