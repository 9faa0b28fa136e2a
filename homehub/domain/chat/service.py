"""Chat service - Per-reservation message log with a simulated worker reply"""

import logging
from typing import Callable, Optional

from ...config import CHAT_AUTO_REPLY_TEXT
from ...errors import InvalidState, NotFound
from ...schemas import Message, Reservation, Role, now_millis
from ...shared.validators import require_text
from ...store import DocumentStore
from ..reservations.repository import ReservationRepository
from .scheduler import ReplyScheduler
from .session import ChatSession

logger = logging.getLogger(__name__)


class ChatService:
    """Service layer for reservation chat"""

    def __init__(
        self,
        store: DocumentStore,
        scheduler: Optional[ReplyScheduler] = None,
        reply_text: str = CHAT_AUTO_REPLY_TEXT,
        clock: Callable[[], int] = now_millis,
    ):
        self.store = store
        self.scheduler = scheduler or ReplyScheduler()
        self.reply_text = reply_text
        self.clock = clock
        self.repo = ReservationRepository()

    def open_chat(self, session: ChatSession, reservation_id: str) -> Reservation:
        """Make ``reservation_id`` the session's open chat and return it"""
        if session.closed:
            raise InvalidState("Chat session is closed")
        reservation = self.repo.get_reservation_by_id(self.store, reservation_id)
        if not reservation:
            raise NotFound("Reservation", reservation_id)
        session.reservation_id = reservation.id
        logger.info(f"💬 {session.actor.id} opened chat for {reservation.id}")
        return reservation

    def send_message(self, session: ChatSession, text: str) -> list[Message]:
        """
        Append a message from the session actor to the open chat.

        Clients get one simulated reply from the assigned worker after the
        scheduler delay. Workers get none.

        Raises:
            InvalidState: If no chat is open in this session
            MissingField: If the text is empty
            NotFound: If the open reservation no longer exists
        """
        if session.closed or session.reservation_id is None:
            raise InvalidState("No chat is open")
        text = require_text(text, "text")
        reservation_id = session.reservation_id

        message = Message(
            sender_name=session.actor.name, text=text, timestamp_millis=self.clock()
        )
        reservation = self.repo.update_reservation(
            self.store, reservation_id, lambda r: r.messages.append(message)
        )
        logger.info(f"💬 Message from {session.actor.id} on {reservation_id}")

        if session.actor.role == Role.CLIENT:
            self.scheduler.schedule(
                reservation_id, lambda: self._deliver_auto_reply(session, reservation_id)
            )

        session.notify(reservation.messages)
        return reservation.messages

    def _deliver_auto_reply(self, session: ChatSession, reservation_id: str) -> None:
        """Append the canned worker reply, using the reservation as stored right now"""

        def append_reply(r: Reservation) -> None:
            r.messages.append(
                Message(
                    sender_name=r.assigned_worker.name,
                    text=self.reply_text,
                    timestamp_millis=self.clock(),
                )
            )

        try:
            reservation = self.repo.update_reservation(self.store, reservation_id, append_reply)
        except NotFound:
            logger.info(f"Reservation {reservation_id} is gone, dropping auto-reply")
            return

        logger.info(f"🤖 Auto-reply delivered on {reservation_id}")
        session.notify(reservation.messages)
