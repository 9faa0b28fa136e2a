"""Reservation repository - Store operations for reservations"""

from typing import Callable, Optional

from ...errors import NotFound
from ...schemas import Reservation
from ...store import COLLECTION_RESERVATIONS, DocumentStore


class ReservationRepository:
    """Repository for the reservation collection"""

    @staticmethod
    def get_reservations(store: DocumentStore) -> list[Reservation]:
        """All reservations in creation order"""
        return [Reservation.model_validate(r) for r in store.get(COLLECTION_RESERVATIONS, [])]

    @staticmethod
    def get_reservation_by_id(store: DocumentStore, reservation_id: str) -> Optional[Reservation]:
        for doc in store.get(COLLECTION_RESERVATIONS, []):
            if doc["id"] == reservation_id:
                return Reservation.model_validate(doc)
        return None

    @staticmethod
    def get_reservations_for_client(store: DocumentStore, email: str) -> list[Reservation]:
        return [
            Reservation.model_validate(r)
            for r in store.get(COLLECTION_RESERVATIONS, [])
            if r["client_email"] == email
        ]

    @staticmethod
    def get_reservations_for_worker(store: DocumentStore, worker_id: str) -> list[Reservation]:
        return [
            Reservation.model_validate(r)
            for r in store.get(COLLECTION_RESERVATIONS, [])
            if r["assigned_worker"]["id"] == worker_id
        ]

    @staticmethod
    def create_reservation(store: DocumentStore, reservation: Reservation) -> Reservation:
        def append(reservations: list) -> list:
            reservations.append(reservation.to_document())
            return reservations

        store.update(COLLECTION_RESERVATIONS, append, default=[])
        return reservation

    @staticmethod
    def update_reservation(
        store: DocumentStore,
        reservation_id: str,
        change: Callable[[Reservation], None],
    ) -> Reservation:
        """
        Apply ``change`` to one reservation and write the collection back.

        ``change`` edits the reservation in place and may raise to abort, in
        which case nothing is written. Runs again on a fresh copy if another
        writer commits the collection in between.

        Raises:
            NotFound: If the reservation does not exist
        """
        result = {}

        def mutate(reservations: list) -> list:
            for index, doc in enumerate(reservations):
                if doc["id"] == reservation_id:
                    reservation = Reservation.model_validate(doc)
                    change(reservation)
                    reservations[index] = reservation.to_document()
                    result["reservation"] = reservation
                    return reservations
            raise NotFound("Reservation", reservation_id)

        store.update(COLLECTION_RESERVATIONS, mutate, default=[])
        return result["reservation"]
