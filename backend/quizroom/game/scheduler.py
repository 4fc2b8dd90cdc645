from __future__ import annotations

from typing import Callable, Protocol

from flask_socketio import SocketIO


class Scheduler(Protocol):
    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> None:
        ...

    def call_every(self, interval_sec: float, callback: Callable[[], bool]) -> None:
        ...


class SocketIOScheduler:
    """Runs deferred callbacks as Socket.IO background tasks.

    There is no cancel handle: callers guard their callbacks with
    generation tokens instead. A repeating callback keeps its single
    runner alive until it returns False.
    """

    def __init__(self, socketio: SocketIO):
        self._socketio = socketio

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> None:
        def _runner() -> None:
            self._socketio.sleep(delay_sec)
            callback()

        self._socketio.start_background_task(_runner)

    def call_every(self, interval_sec: float, callback: Callable[[], bool]) -> None:
        def _runner() -> None:
            while True:
                self._socketio.sleep(interval_sec)
                if not callback():
                    break

        self._socketio.start_background_task(_runner)
