from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config, resolve_async_mode
from .game.questions import QuestionBank
from .game.registry import RoomRegistry
from .game.scheduler import Scheduler, SocketIOScheduler
from .game.service import GameService
from .realtime.channel import SocketIOChannel
from .realtime.handlers import register_socketio_handlers
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp


def create_app(
    config_class: type = Config,
    scheduler: Scheduler | None = None,
    bank: QuestionBank | None = None,
) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    async_mode = resolve_async_mode(app.config.get("SOCKETIO_ASYNC_MODE"))

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    service = GameService(
        registry=RoomRegistry(),
        bank=bank or QuestionBank(),
        scheduler=scheduler or SocketIOScheduler(socketio),
        channel=SocketIOChannel(socketio),
        config=app.config,
    )
    app.extensions["quizroom"] = service

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, service)

    return app, socketio
