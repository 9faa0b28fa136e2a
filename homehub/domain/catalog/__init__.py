"""Catalog domain - Service catalog queries and category classification"""

from .categories import CategoryClassifier, classify_service
from .repository import CatalogRepository
from .service import CatalogService

__all__ = ["CatalogRepository", "CatalogService", "CategoryClassifier", "classify_service"]
