"""Account repository - Store operations for users, workers and the session actor"""

from typing import Optional

from ...errors import DuplicateEmail
from ...schemas import Actor, User, Worker
from ...store import COLLECTION_USERS, COLLECTION_WORKERS, SESSION_ACTOR_KEY, DocumentStore


class AccountRepository:
    """Repository for account documents"""

    @staticmethod
    def get_users(store: DocumentStore) -> list[User]:
        return [User.model_validate(u) for u in store.get(COLLECTION_USERS, [])]

    @staticmethod
    def get_user_by_email(store: DocumentStore, email: str) -> Optional[User]:
        """Exact, case-sensitive email lookup"""
        for doc in store.get(COLLECTION_USERS, []):
            if doc["email"] == email:
                return User.model_validate(doc)
        return None

    @staticmethod
    def add_user(store: DocumentStore, user: User) -> User:
        """Append a user, rejecting an email that is already taken"""

        def append(users: list) -> list:
            if any(u["email"] == user.email for u in users):
                raise DuplicateEmail(user.email)
            users.append(user.to_document())
            return users

        store.update(COLLECTION_USERS, append, default=[])
        return user

    @staticmethod
    def get_workers(store: DocumentStore) -> list[Worker]:
        return [Worker.model_validate(w) for w in store.get(COLLECTION_WORKERS, [])]

    @staticmethod
    def add_worker(store: DocumentStore, worker: Worker) -> Worker:
        def append(workers: list) -> list:
            workers.append(worker.to_document())
            return workers

        store.update(COLLECTION_WORKERS, append, default=[])
        return worker

    @staticmethod
    def get_session_actor(store: DocumentStore) -> Optional[Actor]:
        doc = store.get(SESSION_ACTOR_KEY)
        return Actor.model_validate(doc) if doc else None

    @staticmethod
    def save_session_actor(store: DocumentStore, actor: Actor) -> None:
        store.put(SESSION_ACTOR_KEY, actor.to_document())

    @staticmethod
    def clear_session_actor(store: DocumentStore) -> None:
        store.delete(SESSION_ACTOR_KEY)
