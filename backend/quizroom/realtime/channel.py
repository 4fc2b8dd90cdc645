from __future__ import annotations

from typing import Protocol

from flask_socketio import SocketIO


class Channel(Protocol):
    def publish(self, event: str, payload: dict, to: str) -> None:
        ...

    def subscribe(self, sid: str, room_code: str) -> None:
        ...


class SocketIOChannel:
    """Room-scoped broadcast and per-connection addressing over Socket.IO."""

    def __init__(self, socketio: SocketIO, namespace: str = "/"):
        self._socketio = socketio
        self._namespace = namespace

    def publish(self, event: str, payload: dict, to: str) -> None:
        self._socketio.emit(event, payload, to=to, namespace=self._namespace)

    def subscribe(self, sid: str, room_code: str) -> None:
        self._socketio.server.enter_room(sid, room_code, namespace=self._namespace)
