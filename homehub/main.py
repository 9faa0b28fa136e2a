"""
Process bootstrap: logging, tables and default data
"""

import logging

from . import models  # noqa: F401 - registers the documents table
from .config import LOG_LEVEL, STORE_BACKEND
from .database import Base, engine
from .domain.chat import ReplyScheduler
from .hub import HomeHub
from .seed import seed_defaults
from .store import DocumentStore, build_store

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce verbosity of third-party libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


configure_logging()


def create_tables(bind=engine) -> None:
    try:
        Base.metadata.create_all(bind=bind, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from concurrent startups
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist")
        else:
            logger.error(f"❌ Failed to create database tables: {e}")
            raise


def bootstrap(store: DocumentStore = None, scheduler: ReplyScheduler = None) -> HomeHub:
    """Build a ready-to-use HomeHub on the configured store with default data"""
    if store is None:
        if STORE_BACKEND == "sql":
            create_tables()
        store = build_store()

    summary = seed_defaults(store)
    logger.info(f"🌱 Seed summary: {summary}")
    return HomeHub(store, scheduler=scheduler)
