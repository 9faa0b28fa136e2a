"""
HomeHub facade

The single entry point the presentation layer calls. It wires the domain
services to one store and keeps the chat session of the current actor, so no
chat state is shared between facades.
"""

import logging
from typing import Callable, Optional, Union

from .domain.accounts import AccountService
from .domain.catalog import CatalogService, CategoryClassifier
from .domain.chat import ChatService, ChatSession, ReplyScheduler
from .domain.chat.session import ChatObserver
from .domain.reservations import AssignmentPolicy, ReservationService, can_rate
from .errors import InvalidState, Unauthenticated
from .schemas import Actor, Message, Reservation, Role, Service, ServiceCategory, User, now_millis
from .store import DocumentStore

logger = logging.getLogger(__name__)


class HomeHub:
    """Operations exposed to the presentation layer"""

    def __init__(
        self,
        store: DocumentStore,
        policy: Optional[AssignmentPolicy] = None,
        scheduler: Optional[ReplyScheduler] = None,
        classifier: Optional[CategoryClassifier] = None,
        clock: Callable[[], int] = now_millis,
    ):
        self.store = store
        self.accounts = AccountService(store)
        self.catalog = CatalogService(store, classifier)
        self.reservations = ReservationService(store, self.accounts.current_actor, policy, clock)
        self.chat = ChatService(store, scheduler, clock=clock)
        self._chat_session: Optional[ChatSession] = None
        self._chat_observers: list[ChatObserver] = []

    # Accounts

    def register(self, name: str, email: str, password: str, role: Role = Role.CLIENT) -> User:
        return self.accounts.register(name, email, password, role)

    def login(self, email: str, password: str) -> Actor:
        actor = self.accounts.login(email, password)
        self.close_chat()
        return actor

    def logout(self) -> None:
        self.close_chat()
        self.accounts.logout()

    def current_actor(self) -> Optional[Actor]:
        return self.accounts.current_actor()

    # Catalog

    def list_services(
        self, search_term: str = "", category: Union[ServiceCategory, str, None] = None
    ) -> list[Service]:
        return self.catalog.list_services(search_term, category)

    def service_label(self, service_id: str) -> str:
        return self.catalog.service_label(service_id)

    # Reservations

    def create_reservation(self, service_id: str, date: str, time: str, address: str) -> Reservation:
        return self.reservations.create_reservation(service_id, date, time, address)

    def get_reservation(self, reservation_id: str) -> Reservation:
        return self.reservations.get_reservation(reservation_id)

    def list_reservations_for_client(self, email: str) -> list[Reservation]:
        return self.reservations.list_for_client(email)

    def list_reservations_for_worker(self, worker_id: str) -> list[Reservation]:
        return self.reservations.list_for_worker(worker_id)

    def complete_reservation(self, reservation_id: str) -> None:
        self.reservations.complete_reservation(reservation_id)

    def rate(self, reservation_id: str, score: int, comment: str = "") -> None:
        self.reservations.rate(reservation_id, score, comment)

    def can_rate(self, reservation_id: str) -> bool:
        return can_rate(self.reservations.get_reservation(reservation_id))

    # Chat

    def on_chat_updated(self, observer: ChatObserver) -> ChatObserver:
        """Register a callback receiving the full message list after every change"""
        self._chat_observers.append(observer)
        if self._chat_session is not None:
            self._chat_session.on_chat_updated(observer)
        return observer

    def remove_chat_observer(self, observer: ChatObserver) -> bool:
        """Stop sending updates to ``observer``; False if it was not registered"""
        if observer not in self._chat_observers:
            return False
        self._chat_observers.remove(observer)
        if self._chat_session is not None:
            self._chat_session.remove_observer(observer)
        return True

    def open_chat(self, reservation_id: str) -> Reservation:
        actor = self.accounts.current_actor()
        if actor is None:
            raise Unauthenticated()

        session = self._chat_session
        if session is None or session.actor.id != actor.id:
            self.close_chat()
            session = ChatSession(actor)
            for observer in self._chat_observers:
                session.on_chat_updated(observer)
            self._chat_session = session

        return self.chat.open_chat(session, reservation_id)

    def send_chat_message(self, text: str) -> list[Message]:
        if self._chat_session is None:
            raise InvalidState("No chat is open")
        return self.chat.send_message(self._chat_session, text)

    def close_chat(self) -> None:
        """Close the open chat; pending replies are still stored but not announced"""
        if self._chat_session is not None:
            self._chat_session.close()
            self._chat_session = None
