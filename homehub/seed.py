"""
Default catalog and demo workers
"""

import logging

from .schemas import Service, Worker
from .store import (
    COLLECTION_RESERVATIONS,
    COLLECTION_SERVICES,
    COLLECTION_USERS,
    COLLECTION_WORKERS,
    DocumentStore,
)

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    Service(id="s1", name="Aseo general (casa pequeña)", price=25000, approx_duration="2 h"),
    Service(id="s2", name="Aseo profundo", price=45000, approx_duration="4 h"),
    Service(id="s3", name="Limpieza de ventanas", price=20000, approx_duration="1.5 h"),
    Service(id="s4", name="Lavado de ropa y planchado", price=30000, approx_duration="2.5 h"),
]

DEMO_WORKERS = [
    Worker(id="w1", name="María Pérez"),
    Worker(id="w2", name="Laura Gómez"),
    Worker(id="w3", name="Ana Rodríguez"),
]


def seed_defaults(store: DocumentStore) -> dict:
    """
    Create any missing collection with its default content.

    Existing collections are left untouched, so this is safe to run on every
    startup.

    Returns:
        dict: collection name -> True if it was created by this call
    """
    defaults = {
        COLLECTION_SERVICES: [s.to_document() for s in DEFAULT_SERVICES],
        COLLECTION_WORKERS: [w.to_document() for w in DEMO_WORKERS],
        COLLECTION_USERS: [],
        COLLECTION_RESERVATIONS: [],
    }

    summary = {}
    for key, content in defaults.items():
        # Version 0 only succeeds while the key does not exist yet
        created = store.compare_and_swap(key, content, 0)
        summary[key] = created
        if created:
            logger.info(f"🌱 Seeded '{key}' ({len(content)} entries)")
    return summary
