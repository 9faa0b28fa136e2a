import pytest

from homehub.config import CHAT_AUTO_REPLY_TEXT
from homehub.errors import AlreadyRated, InvalidCategory, InvalidCredentials, InvalidState, NotFound, Unauthenticated
from homehub.hub import HomeHub
from homehub.main import bootstrap
from homehub.schemas import Rating, ReservationStatus


def test_end_to_end_booking_lifecycle(hub):
    hub.register("Ana", "a@x.com", "pw")
    hub.login("a@x.com", "pw")

    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    assert reservation.status == ReservationStatus.CREATED
    assert reservation.assigned_worker is not None

    hub.complete_reservation(reservation.id)
    assert hub.get_reservation(reservation.id).status == ReservationStatus.COMPLETED

    hub.rate(reservation.id, 5, "great")
    assert hub.get_reservation(reservation.id).rating == Rating(score=5, comment="great")

    with pytest.raises(AlreadyRated):
        hub.rate(reservation.id, 5, "great")


def test_booking_after_logout_is_unauthenticated(hub, client):
    hub.logout()
    with pytest.raises(Unauthenticated):
        hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")


def test_client_and_worker_views(hub, client, worker_account):
    from homehub.domain.reservations import FixedAssignmentPolicy

    hub.reservations.policy = FixedAssignmentPolicy(worker_account.id)
    reservation = hub.create_reservation("s3", "2024-05-02", "08:00", "Calle 3")

    assert [r.id for r in hub.list_reservations_for_client("a@x.com")] == [reservation.id]
    assert [r.id for r in hub.list_reservations_for_worker(worker_account.id)] == [reservation.id]
    assert hub.service_label(reservation.service_id) == "Limpieza de ventanas"

    assert not hub.can_rate(reservation.id)
    hub.complete_reservation(reservation.id)
    hub.complete_reservation(reservation.id)
    assert hub.can_rate(reservation.id)


def test_chat_through_the_facade(hub, client, scheduler):
    updates = []
    hub.on_chat_updated(updates.append)
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")

    opened = hub.open_chat(reservation.id)
    assert opened.id == reservation.id

    hub.send_chat_message("Hola")
    scheduler.fire_pending()

    assert [m.text for m in updates[-1]] == ["Hola", CHAT_AUTO_REPLY_TEXT]
    assert updates[-1][-1].sender_name == reservation.assigned_worker.name


def test_worker_chat_has_no_auto_reply(hub, client, worker_account, scheduler):
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    hub.logout()
    hub.login("w@x.com", "secret")

    hub.open_chat(reservation.id)
    messages = hub.send_chat_message("Confirmo la visita")

    assert [m.sender_name for m in messages] == ["Wendy Worker"]
    assert scheduler.pending() == 0


def test_chat_requires_login_and_open_reservation(hub, client):
    with pytest.raises(InvalidState):
        hub.send_chat_message("hola")
    with pytest.raises(NotFound):
        hub.open_chat("r_missing")

    hub.logout()
    with pytest.raises(Unauthenticated):
        hub.open_chat("r_missing")


def test_close_chat_stops_notifications(hub, client, scheduler):
    updates = []
    hub.on_chat_updated(updates.append)
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    hub.open_chat(reservation.id)
    hub.send_chat_message("hola")

    hub.close_chat()
    scheduler.fire_pending()

    assert len(updates) == 1
    assert len(hub.get_reservation(reservation.id).messages) == 2
    with pytest.raises(InvalidState):
        hub.send_chat_message("sigo aquí")


def test_facades_keep_separate_chat_sessions(seeded_store, scheduler, client, hub):
    other = HomeHub(seeded_store, scheduler=scheduler)
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    hub.open_chat(reservation.id)

    with pytest.raises(InvalidState):
        other.send_chat_message("no tengo chat abierto")


def test_catalog_through_the_facade(hub):
    assert [s.id for s in hub.list_services("aseo", "limpieza")] == ["s1", "s2"]
    assert hub.list_services("", "plomeria") == []


def test_bootstrap_seeds_the_given_store(store, scheduler):
    hub = bootstrap(store, scheduler)
    assert len(hub.list_services()) == 4
    assert len(store.get("workers")) == 3


def test_unknown_category_is_a_domain_error(hub):
    with pytest.raises(InvalidCategory):
        hub.list_services("", "jardin")


def test_synchronous_chat_with_the_default_scheduler(seeded_store):
    hub = HomeHub(seeded_store)
    hub.register("Ana", "a@x.com", "pw")
    hub.login("a@x.com", "pw")
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    updates = []
    hub.on_chat_updated(updates.append)
    hub.open_chat(reservation.id)

    messages = hub.send_chat_message("hola")

    assert [m.text for m in messages] == ["hola"]
    assert len(updates) == 1
    assert hub.chat.scheduler.pending(reservation.id) == 1

    assert hub.chat.scheduler.fire_pending() == 1
    assert [m.text for m in updates[-1]] == ["hola", CHAT_AUTO_REPLY_TEXT]
    assert len(hub.get_reservation(reservation.id).messages) == 2


def test_failed_login_keeps_the_open_chat(hub, client):
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    hub.open_chat(reservation.id)

    with pytest.raises(InvalidCredentials):
        hub.login("a@x.com", "wrong")

    assert [m.text for m in hub.send_chat_message("sigo aquí")] == ["sigo aquí"]


def test_removed_observer_stops_receiving_updates(hub, client, scheduler):
    kept, removed = [], []
    hub.on_chat_updated(kept.append)
    hub.on_chat_updated(removed.append)
    reservation = hub.create_reservation("s1", "2024-05-01", "10:00", "Calle 1")
    hub.open_chat(reservation.id)
    hub.send_chat_message("uno")

    assert hub.remove_chat_observer(removed.append)
    assert not hub.remove_chat_observer(removed.append)
    hub.send_chat_message("dos")
    scheduler.cancel_all()

    assert len(kept) == 2
    assert len(removed) == 1

    # A later session does not pick the removed observer back up
    hub.logout()
    hub.login("a@x.com", "pw")
    hub.open_chat(reservation.id)
    hub.send_chat_message("tres")
    scheduler.cancel_all()
    assert len(kept) == 3
    assert len(removed) == 1
