"""
Service category classification

Categories are derived from the service name, never stored. Rules are checked
in order and the first bucket with a matching keyword wins, so a name with
keywords from several buckets lands in the earliest one.
"""

import unicodedata
from typing import Iterable, Optional, Sequence

from ...errors import InvalidCategory
from ...schemas import ServiceCategory

# Keywords are matched as accent-free, case-folded substrings
DEFAULT_RULES: list[tuple[ServiceCategory, tuple[str, ...]]] = [
    (ServiceCategory.LIMPIEZA, ("limpieza", "aseo", "lavado", "planchado", "desinfeccion")),
    (ServiceCategory.PLOMERIA, ("plomeria", "tuberia", "fuga", "grifo", "desague", "sanitario")),
    (ServiceCategory.ELECTRICIDAD, ("electric", "enchufe", "cableado", "iluminacion")),
]

# Values accepted as "no category filter"
ALL_CATEGORIES = ("", "todos", "all")


def normalize(text: str) -> str:
    """Case-fold and strip accents: 'Instalación Eléctrica' -> 'instalacion electrica'"""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


class CategoryClassifier:
    """Ordered keyword rules mapping a service name to a category"""

    def __init__(self, rules: Optional[Sequence[tuple[ServiceCategory, Iterable[str]]]] = None):
        rules = DEFAULT_RULES if rules is None else rules
        self.rules = [
            (category, tuple(normalize(k) for k in keywords)) for category, keywords in rules
        ]

    def classify(self, name: str) -> ServiceCategory:
        normalized = normalize(name)
        for category, keywords in self.rules:
            if any(k in normalized for k in keywords):
                return category
        return ServiceCategory.OTROS


default_classifier = CategoryClassifier()


def classify_service(name: str) -> ServiceCategory:
    return default_classifier.classify(name)


def parse_category(value) -> Optional[ServiceCategory]:
    """
    Turn a filter value into a category; None means "all categories".

    Raises:
        InvalidCategory: If the value names no known category
    """
    if value is None or isinstance(value, ServiceCategory):
        return value
    if value.strip().lower() in ALL_CATEGORIES:
        return None
    try:
        return ServiceCategory(normalize(value.strip()))
    except ValueError:
        raise InvalidCategory(value) from None
