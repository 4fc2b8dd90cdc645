from __future__ import annotations

import uuid
from threading import RLock
from typing import Any, Callable

from .models import Room


def generate_code(length: int = 6) -> str:
    return uuid.uuid4().hex[:length].upper()


def normalize_code(code: Any) -> str:
    return str(code or "").strip().upper()


class RoomRegistry:
    """Process-wide mapping of room code to Room."""

    def __init__(self, code_factory: Callable[[], str] | None = None):
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._code_factory = code_factory or generate_code

    def create(self, **fields: Any) -> Room:
        with self._lock:
            code = self._code_factory()
            while code in self._rooms:
                code = self._code_factory()

            room = Room(code=code, **fields)
            self._rooms[code] = room
            return room

    def get(self, code: Any) -> Room | None:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    def remove(self, code: Any) -> bool:
        with self._lock:
            return self._rooms.pop(normalize_code(code), None) is not None

    def list(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return normalize_code(code) in self._rooms
