"""Account service - Registration, login and the current session actor"""

import logging
from typing import Optional

from ...errors import InvalidCredentials
from ...schemas import Actor, Role, User, Worker
from ...security_utils import hash_password, verify_password
from ...shared.validators import require_text
from ...store import DocumentStore
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for accounts and the session actor"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.repo = AccountRepository()

    def register(self, name: str, email: str, password: str, role: Role = Role.CLIENT) -> User:
        """
        Register a new user.

        Workers are also added to the worker collection (same id) so they can
        be assigned to reservations.

        Raises:
            MissingField: If name, email or password is empty
            DuplicateEmail: If the email is already registered
        """
        name = require_text(name, "name")
        email = require_text(email, "email", strip=False)
        password = require_text(password, "password", strip=False)
        role = Role(role)

        user = User(name=name, email=email, password_hash=hash_password(password), role=role)
        self.repo.add_user(self.store, user)
        logger.info(f"✅ Registered {role.value} {user.id}")

        if role == Role.WORKER:
            self.repo.add_worker(self.store, Worker(id=user.id, name=user.name))
            logger.info(f"👷 Worker {user.id} added to the assignment pool")

        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user with exactly this email and password, or None"""
        user = self.repo.get_user_by_email(self.store, email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def login(self, email: str, password: str) -> Actor:
        """Verify credentials and store the user as the session actor"""
        user = self.authenticate(email, password)
        if user is None:
            logger.warning("⚠️ Login failed: invalid credentials")
            raise InvalidCredentials()

        actor = Actor(id=user.id, name=user.name, email=user.email, role=user.role)
        self.repo.save_session_actor(self.store, actor)
        logger.info(f"🔑 User {user.id} logged in")
        return actor

    def logout(self) -> None:
        self.repo.clear_session_actor(self.store)

    def current_actor(self) -> Optional[Actor]:
        return self.repo.get_session_actor(self.store)
