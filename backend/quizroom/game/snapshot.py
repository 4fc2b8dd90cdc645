from __future__ import annotations

import unicodedata

from .models import Room


NO_QUESTION = "—"


def _script_rank(ch: str) -> int:
    # Russian collation order: non-letters, Cyrillic, Latin, then other scripts.
    if not ch.isalpha():
        return 0
    script = unicodedata.name(ch, "").split(" ", 1)[0]
    if script == "CYRILLIC":
        return 1
    if script == "LATIN":
        return 2
    return 3


def _collation_key(name: str) -> tuple[tuple[tuple[int, str], ...], str]:
    # Primary strength: ignore case and diacritics (ё sorts with е), raw name breaks ties.
    folded = "".join(
        ch for ch in unicodedata.normalize("NFKD", name) if not unicodedata.combining(ch)
    ).casefold()
    return tuple((_script_rank(ch), ch) for ch in folded), name


def room_public_state(room: Room) -> dict:
    question = room.current_question()

    players = sorted(
        ({"name": p.name, "score": p.score} for p in room.players.values()),
        key=lambda p: (-p["score"], _collation_key(p["name"])),
    )

    submissions = []
    for sid, sub in room.submissions.items():
        player = room.players.get(sid)
        if player is None:
            continue
        submissions.append({"name": player.name, "text": sub.text, "points": sub.points})
    submissions.sort(key=lambda s: (-s["points"], _collation_key(s["name"])))

    return {
        "code": room.code,
        "mode": room.mode,
        "phase": room.phase,
        "questionNumber": room.current_index + 1,
        "totalQuestions": len(room.deck),
        "question": question.prompt if question else NO_QUESTION,
        "players": players,
        "submissions": submissions,
        "answeredCount": len(room.submissions),
        "playerCount": len(room.players),
        "timeLeft": room.time_left,
        "questionDuration": room.question_duration,
        "minPlayersToStart": room.min_players_to_start,
    }


def room_moderator_state(room: Room) -> dict:
    payload = room_public_state(room)
    question = room.current_question()
    payload["key"] = (
        [{"text": a.text, "points": a.points} for a in question.key()] if question else []
    )
    return payload
