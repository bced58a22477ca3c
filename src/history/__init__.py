from .store import (
    PlayHistoryStore, InMemoryHistoryStore, JsonHistoryStore,
    get_data_dir, normalize_room_code,
)

__all__ = [
    "PlayHistoryStore", "InMemoryHistoryStore", "JsonHistoryStore",
    "get_data_dir", "normalize_room_code",
]
