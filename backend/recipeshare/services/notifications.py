"""Notification sinks: where controllers send their one-shot toasts."""

import asyncio
from typing import Protocol

import socketio

from recipeshare.logging import get_logger
from recipeshare.models import Notification

logger = get_logger('services.notifications')


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class SocketNotificationSink:
    """Emits a ``notify`` event to one Socket.IO room without waiting for delivery."""

    def __init__(self, sio: socketio.AsyncServer, room: str):
        self.sio = sio
        self.room = room
        self._pending: set[asyncio.Task] = set()

    def notify(self, notification: Notification) -> None:
        logger.debug(f"Notify {self.room[:8]}...: {notification.title}")
        task = asyncio.ensure_future(
            self.sio.emit("notify", notification.model_dump(mode="json"), room=self.room)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
