"""Catalog repository - Read access to the service collection"""

from typing import Optional

from ...schemas import Service
from ...store import COLLECTION_SERVICES, DocumentStore


class CatalogRepository:
    """Repository for the read-only service catalog"""

    @staticmethod
    def get_services(store: DocumentStore) -> list[Service]:
        """All services in catalog order"""
        return [Service.model_validate(s) for s in store.get(COLLECTION_SERVICES, [])]

    @staticmethod
    def get_service_by_id(store: DocumentStore, service_id: str) -> Optional[Service]:
        for doc in store.get(COLLECTION_SERVICES, []):
            if doc["id"] == service_id:
                return Service.model_validate(doc)
        return None
