from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


RoomMode = Literal["moderated", "solo", "auto2"]
RoomPhase = Literal["lobby", "question", "results", "finished"]

AUTO_MODES: tuple[str, ...] = ("solo", "auto2")


@dataclass(frozen=True)
class Answer:
    text: str
    points: int


@dataclass(frozen=True)
class Question:
    prompt: str
    answers: tuple[Answer, ...]

    def key(self) -> list[Answer]:
        """Keyed answers, cheapest first."""
        return sorted(self.answers, key=lambda a: a.points)


@dataclass
class Player:
    id: str
    name: str
    score: int = 0


@dataclass
class Submission:
    text: str
    points: int


@dataclass
class Room:
    code: str
    mode: RoomMode = "moderated"
    moderator_id: str | None = None
    phase: RoomPhase = "lobby"
    current_index: int = -1
    deck: list[Question] = field(default_factory=list)
    question_count: int = 10
    question_duration: int = 60
    time_left: int = 0
    players: dict[str, Player] = field(default_factory=dict)
    submissions: dict[str, Submission] = field(default_factory=dict)
    # Generation tokens; deferred callbacks compare against these before acting.
    countdown_token: int = 0
    countdown_active: bool = False
    auto_token: int = 0
    cleanup_token: int = 0

    @property
    def auto_advance(self) -> bool:
        return self.mode in AUTO_MODES

    @property
    def min_players_to_start(self) -> int:
        return 2 if self.mode == "auto2" else 1

    def current_question(self) -> Question | None:
        if 0 <= self.current_index < len(self.deck):
            return self.deck[self.current_index]
        return None

    def all_answered(self) -> bool:
        if not self.players:
            return False
        return len(self.submissions) >= len(self.players)

    def is_last_question(self) -> bool:
        return self.current_index + 1 >= len(self.deck)

    def is_empty(self) -> bool:
        return not self.players and self.moderator_id is None
