"""WSGI entry point, e.g. ``gunicorn -k eventlet -w 1 backend.wsgi:app``.

One worker only: rooms live in process memory.
"""
import logging
import os

try:
    from backend.quizroom.server import create_app
except ImportError:  # pragma: no cover
    from quizroom.server import create_app

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

app, socketio = create_app()
