from typing import Any


class SocketIOChannel:
    """Unicast/broadcast primitives over a Flask-SocketIO server.

    Safe to call from background tasks: socketio.emit does not need a request
    context.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def unicast(self, sid: str, event: str, payload: Any) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast_all(self, event: str, payload: Any) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace)
