"""Play history stores: where rooms, players and their turns are kept."""

from __future__ import annotations

import asyncio
import json
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from src.engine.errors import HistoryUnavailable, InvalidInput, NotFound
from src.engine.models import PlayerHistory, PlayTurn, RoomHistory, RoomStatus

_ROOM_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def normalize_room_code(room_code: str) -> str:
    """Room codes are case-insensitive and stored upper-case."""
    code = (room_code or "").strip().upper()
    if not _ROOM_CODE_RE.match(code):
        raise InvalidInput(f"Invalid room code: {room_code!r}")
    return code


class PlayHistoryStore(ABC):
    """Capability: read (and record) a room's play history.

    Reads return snapshots; mutating a returned ``RoomHistory`` does not change
    the store until it is passed back to ``save_room``.
    """

    @abstractmethod
    async def get_room(self, room_code: str) -> RoomHistory | None:
        """Return the room snapshot, or None if the room does not exist."""
        pass

    @abstractmethod
    async def save_room(self, room: RoomHistory) -> None:
        """Create or replace a room."""
        pass

    async def get_play_history(self, room_code: str, player_id: str) -> list[PlayTurn]:
        """Turns presented to ``player_id`` in the room, in play order.

        Raises:
            NotFound: Unknown room, or player not in the room
        """
        room = await self.get_room(room_code)
        if room is None:
            raise NotFound("Room not found")
        player = room.players.get(player_id)
        if player is None:
            raise NotFound("Player not found in this room")
        return list(player.turns)

    async def create_room(self, room_code: str, base_category: str | None = None) -> RoomHistory:
        room = RoomHistory(room_code=normalize_room_code(room_code), status="active", base_category=base_category)
        await self.save_room(room)
        return room

    async def record_turn(self, room_code: str, player_id: str, turn: PlayTurn) -> RoomHistory:
        """Append a turn to a player's history, adding the player if needed."""
        room = await self.get_room(room_code)
        if room is None:
            raise NotFound("Room not found")
        player = room.players.setdefault(player_id, PlayerHistory(player_id=player_id))
        player.turns.append(turn)
        await self.save_room(room)
        return room

    async def collect_letter(self, room_code: str, player_id: str, letter: str) -> RoomHistory:
        """Add a letter won by the player towards the grand category."""
        room = await self.get_room(room_code)
        if room is None:
            raise NotFound("Room not found")
        player = room.players.setdefault(player_id, PlayerHistory(player_id=player_id))
        player.collected_letters.append(letter.strip().upper())
        await self.save_room(room)
        return room

    async def set_status(self, room_code: str, status: RoomStatus) -> RoomHistory:
        room = await self.get_room(room_code)
        if room is None:
            raise NotFound("Room not found")
        room.status = status
        await self.save_room(room)
        return room

    async def finish_room(self, room_code: str) -> RoomHistory:
        return await self.set_status(room_code, "finished")


class InMemoryHistoryStore(PlayHistoryStore):
    """Dict-backed store for tests and single-process play."""

    def __init__(self, rooms: list[RoomHistory] | None = None):
        self._rooms: dict[str, RoomHistory] = {}
        for room in rooms or []:
            self._rooms[normalize_room_code(room.room_code)] = room.model_copy(deep=True)

    async def get_room(self, room_code: str) -> RoomHistory | None:
        room = self._rooms.get(normalize_room_code(room_code))
        return room.model_copy(deep=True) if room else None

    async def save_room(self, room: RoomHistory) -> None:
        self._rooms[normalize_room_code(room.room_code)] = room.model_copy(deep=True)


def get_data_dir() -> Path:
    """Get history data directory from env or default."""
    env_dir = os.environ.get("WORDGAME_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("wordgame_data")


class JsonHistoryStore(PlayHistoryStore):
    """One JSON file per room under ``<base_dir>/rooms``."""

    def __init__(self, base_dir: Path | str | None = None):
        self.base_dir = Path(base_dir) if base_dir is not None else get_data_dir()

    def _rooms_dir(self) -> Path:
        return self.base_dir / "rooms"

    def _room_path(self, room_code: str) -> Path:
        return self._rooms_dir() / f"{normalize_room_code(room_code)}.json"

    def ensure_storage(self) -> None:
        self._rooms_dir().mkdir(parents=True, exist_ok=True)

    def _read(self, path: Path) -> RoomHistory | None:
        if not path.exists():
            return None
        try:
            with open(path, "r") as f:
                return RoomHistory.model_validate(json.load(f))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise HistoryUnavailable(f"Room file {path.name} is unreadable: {e}") from e

    def _write(self, path: Path, room: RoomHistory) -> None:
        self.ensure_storage()
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(room.model_dump(mode="json", by_alias=True), f, indent=2)
        tmp_path.replace(path)

    async def get_room(self, room_code: str) -> RoomHistory | None:
        return await asyncio.to_thread(self._read, self._room_path(room_code))

    async def save_room(self, room: RoomHistory) -> None:
        await asyncio.to_thread(self._write, self._room_path(room.room_code), room)

    def list_rooms(self) -> list[str]:
        if not self._rooms_dir().exists():
            return []
        return sorted(path.stem for path in self._rooms_dir().glob("*.json"))
