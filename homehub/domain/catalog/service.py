"""Catalog service - Search and category filtering"""

import logging
from typing import Optional, Union

from ...config import UNKNOWN_SERVICE_LABEL
from ...errors import NotFound
from ...schemas import Service, ServiceCategory
from ...store import DocumentStore
from .categories import CategoryClassifier, default_classifier, normalize, parse_category
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for catalog queries"""

    def __init__(self, store: DocumentStore, classifier: Optional[CategoryClassifier] = None):
        self.store = store
        self.repo = CatalogRepository()
        self.classifier = classifier or default_classifier

    def list_services(
        self,
        search_term: Optional[str] = "",
        category: Union[ServiceCategory, str, None] = None,
    ) -> list[Service]:
        """
        Filter the catalog by name and category.

        Args:
            search_term: Case-insensitive substring of the name; empty matches all
            category: Category to keep; None, "" or "todos" keeps every category

        Returns:
            Matching services in catalog order (possibly empty)
        """
        wanted = parse_category(category)
        term = normalize(search_term or "")

        services = []
        for service in self.repo.get_services(self.store):
            if term and term not in normalize(service.name):
                continue
            if wanted is not None and self.classifier.classify(service.name) != wanted:
                continue
            services.append(service)

        logger.debug(f"🔍 Catalog query term={search_term!r} category={wanted} -> {len(services)}")
        return services

    def category_of(self, service: Service) -> ServiceCategory:
        return self.classifier.classify(service.name)

    def get_service(self, service_id: str) -> Service:
        service = self.repo.get_service_by_id(self.store, service_id)
        if service is None:
            raise NotFound("Service", service_id)
        return service

    def service_label(self, service_id: str) -> str:
        """Service name for display, or a placeholder if the id is dangling"""
        service = self.repo.get_service_by_id(self.store, service_id)
        return service.name if service else UNKNOWN_SERVICE_LABEL
