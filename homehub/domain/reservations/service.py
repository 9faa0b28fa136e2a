"""Reservation service - Lifecycle (create, complete) and rating"""

import logging
from typing import Callable, Optional

from ...errors import AlreadyRated, InvalidState, NotFound, Unauthenticated
from ...schemas import Actor, Rating, Reservation, ReservationStatus, now_millis
from ...shared.validators import require_text
from ...store import DocumentStore
from ..accounts.repository import AccountRepository
from .assignment import AssignmentPolicy, RandomAssignmentPolicy
from .repository import ReservationRepository

logger = logging.getLogger(__name__)

ActorProvider = Callable[[], Optional[Actor]]


def can_rate(reservation: Reservation) -> bool:
    """Rating is offered only for completed, not yet rated reservations"""
    return reservation.status == ReservationStatus.COMPLETED and reservation.rating is None


class ReservationService:
    """
    Service layer for the reservation state machine

    CREATED --complete--> COMPLETED --rate (once)--> COMPLETED + rating
    """

    def __init__(
        self,
        store: DocumentStore,
        actor_provider: ActorProvider,
        policy: Optional[AssignmentPolicy] = None,
        clock: Callable[[], int] = now_millis,
    ):
        self.store = store
        self.actor_provider = actor_provider
        self.policy = policy or RandomAssignmentPolicy()
        self.clock = clock
        self.repo = ReservationRepository()

    def get_reservation(self, reservation_id: str) -> Reservation:
        reservation = self.repo.get_reservation_by_id(self.store, reservation_id)
        if not reservation:
            raise NotFound("Reservation", reservation_id)
        return reservation

    def list_for_client(self, email: str) -> list[Reservation]:
        return self.repo.get_reservations_for_client(self.store, email)

    def list_for_worker(self, worker_id: str) -> list[Reservation]:
        return self.repo.get_reservations_for_worker(self.store, worker_id)

    def create_reservation(self, service_id: str, date: str, time: str, address: str) -> Reservation:
        """
        Book a service for the current actor and assign a worker.

        Date and time are free text; only emptiness is checked.

        Raises:
            MissingField: If service id, date, time or address is empty
            Unauthenticated: If nobody is logged in
            NoWorkersAvailable: If there is no worker to assign
        """
        service_id = require_text(service_id, "service_id")
        date = require_text(date, "date")
        time = require_text(time, "time")
        address = require_text(address, "address")

        actor = self.actor_provider()
        if actor is None:
            logger.warning("⚠️ Reservation attempt without a logged in user")
            raise Unauthenticated()

        workers = AccountRepository.get_workers(self.store)
        worker = self.policy.select_worker(workers)

        reservation = Reservation(
            client_email=actor.email,
            service_id=service_id,
            date=date,
            time=time,
            address=address,
            assigned_worker=worker.model_copy(),
            created_at_millis=self.clock(),
        )
        self.repo.create_reservation(self.store, reservation)
        logger.info(
            f"📅 Reservation {reservation.id} created for {service_id}, "
            f"assigned worker: {worker.name} ({worker.id})"
        )
        return reservation

    def complete_reservation(self, reservation_id: str) -> Reservation:
        """
        Mark a reservation as COMPLETED.

        Completing an already completed reservation changes nothing and is not
        an error. Restricting this to the assigned worker is left to the caller.
        """
        reservation = self.get_reservation(reservation_id)
        if reservation.status == ReservationStatus.COMPLETED:
            logger.info(f"Reservation {reservation_id} already completed, nothing to do")
            return reservation

        def mark_completed(r: Reservation) -> None:
            r.status = ReservationStatus.COMPLETED

        reservation = self.repo.update_reservation(self.store, reservation_id, mark_completed)
        logger.info(f"✅ Reservation {reservation_id} transitioned: CREATED → COMPLETED")
        return reservation

    def rate(self, reservation_id: str, score: int, comment: Optional[str] = "") -> Reservation:
        """
        Attach the one-time rating to a completed reservation.

        Raises:
            NotFound: If the reservation does not exist
            InvalidState: If the reservation is not COMPLETED
            AlreadyRated: If it already has a rating
        """

        def attach_rating(r: Reservation) -> None:
            if r.status != ReservationStatus.COMPLETED:
                raise InvalidState(
                    f"Reservation '{reservation_id}' is {r.status.value}, only COMPLETED can be rated"
                )
            if r.rating is not None:
                raise AlreadyRated(reservation_id)
            r.rating = Rating(score=score, comment=(comment or "").strip())

        reservation = self.repo.update_reservation(self.store, reservation_id, attach_rating)
        logger.info(f"⭐ Reservation {reservation_id} rated {score}")
        return reservation
