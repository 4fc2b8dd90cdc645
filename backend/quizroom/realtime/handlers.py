from __future__ import annotations

from typing import Any

from flask import request
from flask_socketio import SocketIO

from ..game.service import GameService
from . import events


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _room_code(payload: dict) -> str:
    return str(payload.get("roomCode", "")).strip()


def register_socketio_handlers(socketio: SocketIO, service: GameService) -> None:
    @socketio.on(events.ROOM_CREATE)
    def room_create(data=None):
        service.create_moderated_room(request.sid)

    @socketio.on(events.ROOM_CREATE_AUTO)
    def room_create_auto(data=None):
        payload = _payload(data)
        service.create_auto_room(
            request.sid,
            mode=payload.get("mode"),
            name=payload.get("name"),
            seconds=payload.get("seconds"),
            count=payload.get("count"),
        )

    @socketio.on(events.ROOM_JOIN)
    def room_join(data=None):
        payload = _payload(data)
        service.join_room(request.sid, _room_code(payload), payload.get("name"))

    @socketio.on(events.ROOM_SET_DURATION)
    def room_set_duration(data=None):
        payload = _payload(data)
        service.set_duration(request.sid, _room_code(payload), payload.get("seconds"))

    @socketio.on(events.ROOM_SET_QUESTION_COUNT)
    def room_set_question_count(data=None):
        payload = _payload(data)
        service.set_question_count(request.sid, _room_code(payload), payload.get("count"))

    @socketio.on(events.GAME_ADVANCE)
    def game_advance(data=None):
        service.advance(request.sid, _room_code(_payload(data)))

    @socketio.on(events.GAME_REVEAL_RESULTS)
    def game_reveal_results(data=None):
        service.reveal_results(request.sid, _room_code(_payload(data)))

    @socketio.on(events.GAME_FINISH)
    def game_finish(data=None):
        service.finish(request.sid, _room_code(_payload(data)))

    @socketio.on(events.GAME_RESET)
    def game_reset(data=None):
        service.reset(request.sid, _room_code(_payload(data)))

    @socketio.on(events.ANSWER_SUBMIT)
    def answer_submit(data=None):
        payload = _payload(data)
        service.submit_answer(request.sid, _room_code(payload), payload.get("text"))

    @socketio.on("disconnect")
    def on_disconnect(*args):
        service.disconnect(request.sid)
