"""Publish-only real-time channel used by resources that announce creates."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)


class Broadcaster(Protocol):
    def publish(self, event: str, payload: Any) -> None:
        ...


class NullBroadcaster:
    """Drops every event."""

    def publish(self, event: str, payload: Any) -> None:
        logger.debug("No broadcast channel configured, dropping %s", event)


class SocketIOBroadcaster:
    """Emit events to every client connected to a Flask-SocketIO server.

    Delivery is best effort: there is no acknowledgement and a failing
    emit is logged and dropped so the originating request still succeeds.
    """

    def __init__(self, socketio: SocketIO):
        self._socketio = socketio

    def publish(self, event: str, payload: Any) -> None:
        try:
            self._socketio.emit(event, payload)
        except Exception:
            logger.warning("Failed to broadcast %s", event, exc_info=True)


__all__ = ["Broadcaster", "NullBroadcaster", "SocketIOBroadcaster"]
