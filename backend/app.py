"""Development server entry point: ``python backend/app.py``."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

try:
    from backend.quizroom.config import resolve_async_mode
except ImportError:  # pragma: no cover
    from quizroom.config import resolve_async_mode

REPO_ROOT = Path(__file__).resolve().parents[1]

logger = logging.getLogger("quizroom")


def env_flag(name: str, default: bool) -> bool:
    return os.environ.get(name, "1" if default else "0") == "1"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.environ.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    load_dotenv(REPO_ROOT / ".env")
    configure_logging()

    # Green threads must be patched in before Flask and the socket stack load.
    async_mode = resolve_async_mode(os.environ.get("SOCKETIO_ASYNC_MODE"))
    if async_mode == "eventlet":
        import eventlet

        eventlet.monkey_patch()

    try:
        from backend.quizroom.server import create_app
    except ImportError:  # pragma: no cover
        from quizroom.server import create_app

    app, socketio = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))
    logger.info("[serve] host=%s port=%s async_mode=%s", host, port, async_mode)

    socketio.run(
        app,
        host=host,
        port=port,
        debug=env_flag("FLASK_DEBUG", True),
        allow_unsafe_werkzeug=env_flag("ALLOW_UNSAFE_WERKZEUG", True),
        use_reloader=env_flag("FLASK_USE_RELOADER", False),
    )


if __name__ == "__main__":
    main()
