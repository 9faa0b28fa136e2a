"""Chat session - Per-session open reservation and update observers"""

import logging
from typing import Callable, Optional

from ...schemas import Actor, Message

logger = logging.getLogger(__name__)

ChatObserver = Callable[[list[Message]], None]


class ChatSession:
    """
    Chat context of one logged in actor.

    Tracks which reservation's chat is open and who wants to hear about new
    messages. A closed session keeps nothing open and notifies nobody.
    """

    def __init__(self, actor: Actor):
        self.actor = actor
        self.reservation_id: Optional[str] = None
        self.closed = False
        self._observers: list[ChatObserver] = []

    def on_chat_updated(self, observer: ChatObserver) -> ChatObserver:
        self._observers.append(observer)
        return observer

    def remove_observer(self, observer: ChatObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, messages: list[Message]) -> None:
        if self.closed:
            return
        for observer in list(self._observers):
            try:
                observer(list(messages))
            except Exception as e:
                logger.exception(f"❌ Chat observer failed: {e}")

    def close(self) -> None:
        self.closed = True
        self.reservation_id = None
        self._observers.clear()
