"""
Persistent document store.

Documents are arbitrary JSON-compatible values kept under a string key and
always replaced whole. Each key carries a monotonically increasing version,
so read-modify-write cycles can be committed with compare-and-swap instead of
silently overwriting a concurrent writer.
"""

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import redis
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .config import REDIS_URL, STORE_BACKEND, STORE_KEY_PREFIX, STORE_MAX_RETRIES
from .errors import ConcurrentModification, StoreError
from .models import StoredDocument

logger = logging.getLogger(__name__)

# Layout version written next to every document
STORE_SCHEMA_VERSION = 1

# Collection keys
COLLECTION_USERS = "users"
COLLECTION_WORKERS = "workers"
COLLECTION_SERVICES = "services"
COLLECTION_RESERVATIONS = "reservations"
SESSION_ACTOR_KEY = "session_actor"


def _encode(key: str, document: Any) -> str:
    try:
        return json.dumps(document, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StoreError(f"Document '{key}' is not serializable: {e}") from e


def _decode(key: str, body: str, schema_version: int) -> Any:
    if schema_version > STORE_SCHEMA_VERSION:
        raise StoreError(
            f"Document '{key}' has schema version {schema_version}, "
            f"newer than supported version {STORE_SCHEMA_VERSION}"
        )
    try:
        return json.loads(body)
    except ValueError as e:
        raise StoreError(f"Document '{key}' is corrupted: {e}") from e


class DocumentStore(ABC):
    """Key-keyed document storage with read/replace and versioned writes"""

    def __init__(self, max_retries: int = STORE_MAX_RETRIES):
        self.max_retries = max_retries

    @abstractmethod
    def get_versioned(self, key: str) -> tuple[Any, int]:
        """Return ``(document, version)``; version 0 means the key is absent."""

    @abstractmethod
    def put(self, key: str, document: Any) -> None:
        """Replace the document unconditionally (last writer wins)."""

    @abstractmethod
    def compare_and_swap(self, key: str, document: Any, expected_version: int) -> bool:
        """Replace the document only if its version is still ``expected_version``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the key. Deleting a missing key is a no-op."""

    def get(self, key: str, default: Any = None) -> Any:
        document, version = self.get_versioned(key)
        if version == 0:
            return default
        return document

    def update(self, key: str, mutator: Callable[[Any], Any], default: Any = None) -> Any:
        """
        Atomically read, mutate and write back one document.

        ``mutator`` receives a private copy of the current document (or of
        ``default`` when the key is absent) and returns the new document. Any
        exception it raises propagates and nothing is written. When another
        writer commits in between, the cycle is retried with fresh data.

        Raises:
            ConcurrentModification: if every attempt lost the race
        """
        for attempt in range(1, self.max_retries + 1):
            current, version = self.get_versioned(key)
            if version == 0:
                current = copy.deepcopy(default)
            updated = mutator(current)
            if self.compare_and_swap(key, updated, version):
                return updated
            logger.warning(f"⚠️ Write conflict on '{key}' (attempt {attempt}/{self.max_retries})")

        logger.error(f"❌ Giving up on '{key}' after {self.max_retries} conflicting writes")
        raise ConcurrentModification(key, self.max_retries)


class SqlDocumentStore(DocumentStore):
    """Documents stored as rows of the ``documents`` table"""

    def __init__(self, session_factory, max_retries: int = STORE_MAX_RETRIES):
        super().__init__(max_retries)
        self._session_factory = session_factory

    def get_versioned(self, key: str) -> tuple[Any, int]:
        db = self._session_factory()
        try:
            row = db.query(StoredDocument).filter(StoredDocument.key == key).first()
            if row is None:
                return None, 0
            return _decode(key, row.body, row.schema_version), row.version
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to read '{key}': {e}")
            raise StoreError(f"Failed to read '{key}'") from e
        finally:
            db.close()

    def put(self, key: str, document: Any) -> None:
        body = _encode(key, document)
        db = self._session_factory()
        try:
            row = db.query(StoredDocument).filter(StoredDocument.key == key).first()
            if row is None:
                db.add(
                    StoredDocument(
                        key=key, body=body, version=1, schema_version=STORE_SCHEMA_VERSION
                    )
                )
            else:
                row.body = body
                row.version = row.version + 1
                row.schema_version = STORE_SCHEMA_VERSION
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to write '{key}': {e}")
            raise StoreError(f"Failed to write '{key}'") from e
        finally:
            db.close()

    def compare_and_swap(self, key: str, document: Any, expected_version: int) -> bool:
        body = _encode(key, document)
        db = self._session_factory()
        try:
            if expected_version == 0:
                db.add(
                    StoredDocument(
                        key=key, body=body, version=1, schema_version=STORE_SCHEMA_VERSION
                    )
                )
                try:
                    db.commit()
                except IntegrityError:
                    # Someone else created the key first
                    db.rollback()
                    return False
                return True

            updated = (
                db.query(StoredDocument)
                .filter(StoredDocument.key == key, StoredDocument.version == expected_version)
                .update(
                    {
                        StoredDocument.body: body,
                        StoredDocument.version: expected_version + 1,
                        StoredDocument.schema_version: STORE_SCHEMA_VERSION,
                    },
                    synchronize_session=False,
                )
            )
            db.commit()
            return updated == 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to write '{key}': {e}")
            raise StoreError(f"Failed to write '{key}'") from e
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db = self._session_factory()
        try:
            db.query(StoredDocument).filter(StoredDocument.key == key).delete(
                synchronize_session=False
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to delete '{key}': {e}")
            raise StoreError(f"Failed to delete '{key}'") from e
        finally:
            db.close()


class RedisDocumentStore(DocumentStore):
    """Documents stored as Redis hashes (``body``, ``version``, ``schema_version``)"""

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = STORE_KEY_PREFIX,
        max_retries: int = STORE_MAX_RETRIES,
    ):
        super().__init__(max_retries)
        self._client = client
        self._prefix = key_prefix

    def _name(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get_versioned(self, key: str) -> tuple[Any, int]:
        try:
            data = self._client.hgetall(self._name(key))
        except redis.RedisError as e:
            logger.error(f"❌ Failed to read '{key}' from Redis: {e}")
            raise StoreError(f"Failed to read '{key}'") from e
        if not data:
            return None, 0
        return _decode(key, data["body"], int(data["schema_version"])), int(data["version"])

    def put(self, key: str, document: Any) -> None:
        body = _encode(key, document)
        name = self._name(key)
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.hset(name, mapping={"body": body, "schema_version": STORE_SCHEMA_VERSION})
            pipe.hincrby(name, "version", 1)
            pipe.execute()
        except redis.RedisError as e:
            logger.error(f"❌ Failed to write '{key}' to Redis: {e}")
            raise StoreError(f"Failed to write '{key}'") from e

    def compare_and_swap(self, key: str, document: Any, expected_version: int) -> bool:
        body = _encode(key, document)
        name = self._name(key)
        try:
            with self._client.pipeline() as pipe:
                try:
                    pipe.watch(name)
                    current = pipe.hget(name, "version")
                    if (int(current) if current else 0) != expected_version:
                        pipe.unwatch()
                        return False
                    pipe.multi()
                    pipe.hset(
                        name,
                        mapping={
                            "body": body,
                            "version": expected_version + 1,
                            "schema_version": STORE_SCHEMA_VERSION,
                        },
                    )
                    pipe.execute()
                    return True
                except redis.WatchError:
                    return False
        except redis.RedisError as e:
            logger.error(f"❌ Failed to write '{key}' to Redis: {e}")
            raise StoreError(f"Failed to write '{key}'") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._name(key))
        except redis.RedisError as e:
            logger.error(f"❌ Failed to delete '{key}' from Redis: {e}")
            raise StoreError(f"Failed to delete '{key}'") from e


def get_redis_client(redis_url: Optional[str] = None) -> redis.Redis:
    """Create a Redis client from ``REDIS_URL`` or the individual REDIS_* settings"""
    redis_url = redis_url or REDIS_URL

    if redis_url:
        # Mask password in URL for logging
        if "@" in redis_url:
            url_parts = redis_url.split("@")
            protocol = url_parts[0].split(":")[0]
            masked_url = f"{protocol}:****@{url_parts[1]}"
        else:
            masked_url = "****"
        logger.info(f"📡 Using Redis URL connection: {masked_url}")
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=15,
            socket_timeout=30,
            retry_on_timeout=True,
            health_check_interval=30,
        )
    else:
        redis_host = os.getenv("REDIS_HOST", "localhost")
        redis_port = int(os.getenv("REDIS_PORT", "6379"))
        logger.info(f"📡 Using Redis at {redis_host}:{redis_port}")
        client = redis.Redis(
            host=redis_host,
            port=redis_port,
            password=os.getenv("REDIS_PASSWORD", None),
            db=int(os.getenv("REDIS_DB", "0")),
            ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
            decode_responses=True,
            socket_connect_timeout=15,
            socket_timeout=30,
            retry_on_timeout=True,
        )

    try:
        client.ping()
        logger.info("Redis connected successfully")
    except redis.RedisError as e:
        logger.error(f"❌ Failed to connect to Redis: {str(e)}")
        raise StoreError("Redis is not reachable") from e
    return client


def build_store(session_factory=None, backend: str = STORE_BACKEND) -> DocumentStore:
    """Build the store selected by ``STORE_BACKEND``"""
    if backend == "redis":
        logger.info("🗄️ Using Redis document store")
        return RedisDocumentStore(get_redis_client())
    if backend != "sql":
        raise StoreError(f"Unknown store backend '{backend}'")

    if session_factory is None:
        from .database import SessionLocal

        session_factory = SessionLocal
    logger.info("🗄️ Using SQL document store")
    return SqlDocumentStore(session_factory)
