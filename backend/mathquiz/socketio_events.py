from flask import current_app, request
from mathquiz import socketio
from mathquiz.services.quiz import QuizEngine


def _engine() -> QuizEngine:
    return current_app.extensions['quiz_engine']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _engine().connect(_get_sid())


def handle_disconnect(*args):
    _engine().disconnect(_get_sid())


def handle_join_game(data=None):
    # Clients send either a bare name or {'displayName': ...}
    if isinstance(data, dict):
        data = data.get('displayName') or data.get('name')
    _engine().join(_get_sid(), data if isinstance(data, str) else None)


def handle_submit_answer(data):
    if not isinstance(data, dict):
        current_app.logger.info(f"[submit-ignored] session={_get_sid()} malformed payload={data!r}")
        return
    _engine().submit_answer(_get_sid(), data.get('questionId'), data.get('answer'))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('submitAnswer', handle_submit_answer, namespace=namespace)
