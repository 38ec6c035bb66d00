from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One engine per app; all live sessions belong to it
    from mathquiz.services.quiz import QuizEngine, QuizSettings
    from mathquiz.services.quiz.channel import SocketIOChannel
    from mathquiz.services.quiz.scheduler import SocketIOScheduler
    engine = QuizEngine(
        channel=SocketIOChannel(socketio),
        scheduler=scheduler or SocketIOScheduler(socketio),
        settings=QuizSettings.from_config(flask_app.config),
    )
    flask_app.extensions['quiz_engine'] = engine

    # Import and register blueprints here
    from mathquiz.main import main
    flask_app.register_blueprint(main)

    from mathquiz.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api')

    # Register Socket.IO event handlers
    from mathquiz.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    flask_app.logger.info(
        f"[init] questions={engine.settings.question_count} time_limit={engine.settings.question_time_limit_sec}s"
    )
    return flask_app
