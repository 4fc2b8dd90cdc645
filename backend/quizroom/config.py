from __future__ import annotations

import os
import sys


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO (empty = pick per platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Game
    QUESTION_DURATION_SEC = int(os.environ.get("QUESTION_DURATION_SEC", "60"))
    QUESTION_COUNT = int(os.environ.get("QUESTION_COUNT", "10"))
    AUTO_RESULTS_DELAY_SEC = float(os.environ.get("AUTO_RESULTS_DELAY_SEC", "3"))
    DEFAULT_PLAYER_NAME = os.environ.get("DEFAULT_PLAYER_NAME", "Игрок")

    # Empty rooms are dropped after this many seconds (0 keeps them forever)
    EMPTY_ROOM_TTL_SEC = float(os.environ.get("EMPTY_ROOM_TTL_SEC", "60"))



def resolve_async_mode(requested: str | None = None) -> str:
    """Socket.IO async mode: the requested one, else eventlet where it is safe."""
    mode = (requested or "").strip()
    if mode:
        return mode
    # eventlet has known compatibility issues on Windows and Python >= 3.13
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"
