from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Mapping

from ..realtime import events
from ..realtime.channel import Channel
from .matcher import score_answer
from .models import Player, Room, Submission
from .questions import DECK_MAX, DECK_MIN, QuestionBank, clamp_int
from .registry import RoomRegistry
from .scheduler import Scheduler
from .snapshot import room_moderator_state, room_public_state


logger = logging.getLogger(__name__)

DURATION_MIN = 10
DURATION_MAX = 300
NAME_MAX_LEN = 24
ANSWER_MAX_LEN = 60
COUNTDOWN_TICK_SEC = 1


def _stop_countdown(room: Room) -> None:
    room.countdown_token += 1
    room.countdown_active = False


def _stop_auto(room: Room) -> None:
    room.auto_token += 1


class GameService:
    """Room lifecycle: phases, countdowns, auto-advance and scoring.

    Every public operation and every timer callback runs under one lock and
    publishes its snapshots before releasing it, so a room's snapshots come
    out in the same order as the triggers that produced them. Guarded
    (rejected) triggers publish nothing.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        bank: QuestionBank,
        scheduler: Scheduler,
        channel: Channel,
        config: Mapping[str, Any] | None = None,
    ):
        cfg = config or {}
        self.registry = registry
        self.bank = bank
        self._scheduler = scheduler
        self._channel = channel
        self._lock = RLock()

        self.default_duration = clamp_int(
            cfg.get("QUESTION_DURATION_SEC", 60), DURATION_MIN, DURATION_MAX, 60
        )
        self.default_count = clamp_int(cfg.get("QUESTION_COUNT", DECK_MIN), DECK_MIN, DECK_MAX, DECK_MIN)
        self.auto_delay_sec = float(cfg.get("AUTO_RESULTS_DELAY_SEC", 3))
        self.empty_room_ttl_sec = float(cfg.get("EMPTY_ROOM_TTL_SEC", 0))
        self.default_player_name = str(cfg.get("DEFAULT_PLAYER_NAME", "Игрок"))

    # ---- lookups -------------------------------------------------------

    def get_room(self, code: Any) -> Room | None:
        return self.registry.get(code)

    def public_state(self, room: Room) -> dict:
        with self._lock:
            return room_public_state(room)

    def safe_name(self, raw: Any) -> str:
        name = str(raw or "").strip()[:NAME_MAX_LEN].strip()
        return name or self.default_player_name

    def _room_or_notify(self, sid: str, code: Any) -> Room | None:
        room = self.registry.get(code)
        if room is None:
            self._channel.publish(events.ROOM_ERROR, {"error": "room_not_found"}, sid)
        return room

    def _moderated_room(self, sid: str, code: Any) -> Room | None:
        room = self._room_or_notify(sid, code)
        if room is None:
            return None
        # Non-moderators get no feedback at all.
        if room.moderator_id is None or room.moderator_id != sid:
            return None
        return room

    # ---- broadcast -----------------------------------------------------

    def _broadcast(self, room: Room) -> None:
        try:
            self._channel.publish(events.ROOM_STATE, room_public_state(room), room.code)
            if room.moderator_id:
                self._channel.publish(
                    events.ROOM_MODERATOR_STATE, room_moderator_state(room), room.moderator_id
                )
        except Exception:
            logger.exception("[broadcast-error] room=%s", room.code)

    # ---- timers --------------------------------------------------------

    def _start_countdown(self, room: Room) -> None:
        _stop_countdown(room)
        room.time_left = room.question_duration
        room.countdown_active = True
        token = room.countdown_token
        logger.debug("[timer-start] room=%s duration=%ss", room.code, room.question_duration)
        code = room.code
        self._scheduler.call_every(COUNTDOWN_TICK_SEC, lambda: self._on_tick(code, token))

    def _on_tick(self, code: str, token: int) -> bool:
        """One countdown second. Returns False once this countdown is over or stale."""
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.countdown_token != token:
                return False

            room.time_left -= 1
            if room.time_left > 0:
                self._broadcast(room)
                return True

            _stop_countdown(room)
            room.time_left = 0
            if room.phase == "question":
                logger.info("[timer-expire] room=%s question=%s", code, room.current_index + 1)
                self._enter_results(room)
            else:
                self._broadcast(room)
            return False

    def _schedule_auto_advance(self, room: Room) -> None:
        if not room.auto_advance or room.phase != "results":
            return

        room.auto_token += 1
        token = room.auto_token
        code = room.code
        logger.debug("[auto-schedule] room=%s token=%s delay=%ss", code, token, self.auto_delay_sec)
        self._scheduler.call_later(self.auto_delay_sec, lambda: self._on_auto_advance(code, token))

    def _on_auto_advance(self, code: str, token: int) -> None:
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.auto_token != token or room.phase != "results":
                logger.debug("[auto-stale] room=%s token=%s", code, token)
                return

            logger.info("[auto-fire] room=%s question=%s", code, room.current_index + 1)
            if room.is_last_question():
                self._finish(room)
            else:
                self._advance(room)

    def _schedule_cleanup(self, room: Room) -> None:
        if self.empty_room_ttl_sec <= 0:
            return

        room.cleanup_token += 1
        token = room.cleanup_token
        code = room.code
        self._scheduler.call_later(self.empty_room_ttl_sec, lambda: self._on_cleanup(code, token))

    def _on_cleanup(self, code: str, token: int) -> None:
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.cleanup_token != token or not room.is_empty():
                return

            _stop_countdown(room)
            _stop_auto(room)
            self.registry.remove(code)
            logger.info("[room-remove] room=%s reason=empty", code)

    # ---- transitions ---------------------------------------------------

    def _advance(self, room: Room) -> None:
        _stop_auto(room)
        _stop_countdown(room)

        room.current_index += 1
        if room.current_index >= len(room.deck):
            room.current_index = len(room.deck) - 1
            room.phase = "finished"
            room.time_left = 0
            self._broadcast(room)
            return

        room.phase = "question"
        room.submissions.clear()
        self._start_countdown(room)
        self._broadcast(room)

    def _enter_results(self, room: Room) -> None:
        _stop_countdown(room)
        room.time_left = 0
        room.phase = "results"
        self._broadcast(room)
        self._schedule_auto_advance(room)

    def _finish(self, room: Room) -> None:
        _stop_auto(room)
        _stop_countdown(room)
        room.time_left = 0
        room.phase = "finished"
        self._broadcast(room)

    def _return_to_lobby(self, room: Room) -> None:
        _stop_auto(room)
        _stop_countdown(room)
        room.time_left = 0
        room.current_index = -1
        room.phase = "lobby"
        room.submissions.clear()
        self._broadcast(room)

    def _maybe_auto_start(self, room: Room) -> None:
        if not room.auto_advance or room.phase != "lobby":
            return
        if len(room.players) < room.min_players_to_start:
            return
        logger.info("[auto-start] room=%s players=%s", room.code, len(room.players))
        self._advance(room)

    def _add_player(self, room: Room, sid: str, name: Any) -> Player:
        player = Player(id=sid, name=self.safe_name(name))
        room.players[sid] = player
        # A join cancels any pending empty-room cleanup.
        room.cleanup_token += 1
        self._channel.subscribe(sid, room.code)
        return player

    # ---- operations ----------------------------------------------------

    def create_moderated_room(self, sid: str) -> Room:
        with self._lock:
            room = self.registry.create(
                mode="moderated",
                moderator_id=sid,
                question_count=self.default_count,
                question_duration=self.default_duration,
                deck=self.bank.build_deck(self.default_count),
            )
            logger.info("[room-create] room=%s mode=%s", room.code, room.mode)

            self._channel.subscribe(sid, room.code)
            self._channel.publish(events.ROOM_CREATED, {"roomCode": room.code, "mode": room.mode}, sid)
            self._broadcast(room)
            return room

    def create_auto_room(self, sid: str, mode: Any, name: Any, seconds: Any, count: Any) -> Room:
        with self._lock:
            room_mode = "auto2" if mode == "auto2" else "solo"
            question_count = clamp_int(count, DECK_MIN, DECK_MAX, self.default_count)
            room = self.registry.create(
                mode=room_mode,
                question_count=question_count,
                question_duration=clamp_int(seconds, DURATION_MIN, DURATION_MAX, self.default_duration),
                deck=self.bank.build_deck(question_count),
            )
            logger.info("[room-create] room=%s mode=%s", room.code, room.mode)

            self._add_player(room, sid, name)
            self._channel.publish(events.ROOM_CREATED, {"roomCode": room.code, "mode": room.mode}, sid)
            self._broadcast(room)
            self._maybe_auto_start(room)
            return room

    def join_room(self, sid: str, code: Any, name: Any) -> Room | None:
        with self._lock:
            room = self._room_or_notify(sid, code)
            if room is None:
                return None

            self._add_player(room, sid, name)
            self._broadcast(room)
            self._maybe_auto_start(room)
            return room

    def set_duration(self, sid: str, code: Any, seconds: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None:
                return False

            room.question_duration = clamp_int(seconds, DURATION_MIN, DURATION_MAX, room.question_duration)
            if room.phase == "question":
                room.time_left = min(room.time_left, room.question_duration)
            self._broadcast(room)
            return True

    def set_question_count(self, sid: str, code: Any, count: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None or room.phase != "lobby":
                return False

            room.question_count = clamp_int(count, DECK_MIN, DECK_MAX, room.question_count)
            room.deck = self.bank.build_deck(room.question_count)
            room.current_index = -1
            room.submissions.clear()
            room.time_left = 0
            self._broadcast(room)
            return True

    def advance(self, sid: str, code: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None or room.phase not in ("lobby", "results"):
                return False

            self._advance(room)
            return True

    def reveal_results(self, sid: str, code: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None or room.phase != "question":
                return False

            self._enter_results(room)
            return True

    def finish(self, sid: str, code: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None:
                return False

            self._finish(room)
            return True

    def reset(self, sid: str, code: Any) -> bool:
        with self._lock:
            room = self._moderated_room(sid, code)
            if room is None:
                return False

            _stop_auto(room)
            _stop_countdown(room)
            room.time_left = 0
            room.current_index = -1
            room.phase = "lobby"
            room.submissions.clear()
            for player in room.players.values():
                player.score = 0
            self._broadcast(room)
            return True

    def submit_answer(self, sid: str, code: Any, text: Any) -> bool:
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.phase != "question":
                return False
            if sid in room.submissions:
                return False

            player = room.players.get(sid)
            question = room.current_question()
            if player is None or question is None:
                return False

            clean = str(text or "").strip()[:ANSWER_MAX_LEN]
            points = score_answer(question, clean)
            player.score += points
            room.submissions[sid] = Submission(text=clean, points=points)

            if room.all_answered():
                self._enter_results(room)
            else:
                self._broadcast(room)
            return True

    def disconnect(self, sid: str) -> None:
        with self._lock:
            for room in self.registry.list():
                was_member = False
                if room.moderator_id == sid:
                    room.moderator_id = None
                    was_member = True

                if room.players.pop(sid, None) is not None:
                    was_member = True
                    room.submissions.pop(sid, None)

                    if room.mode == "auto2" and len(room.players) < room.min_players_to_start:
                        self._return_to_lobby(room)
                    elif room.phase == "question" and room.all_answered():
                        self._enter_results(room)
                    else:
                        self._broadcast(room)

                if was_member and room.is_empty():
                    self._schedule_cleanup(room)
