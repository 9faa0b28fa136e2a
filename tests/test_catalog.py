import pytest

from homehub.domain.catalog import CatalogService, CategoryClassifier, classify_service
from homehub.errors import HomeHubError, InvalidCategory
from homehub.schemas import ServiceCategory


@pytest.mark.parametrize(
    "name,category",
    [
        ("Limpieza de ventanas", ServiceCategory.LIMPIEZA),
        ("Aseo profundo", ServiceCategory.LIMPIEZA),
        ("Lavado de ropa y planchado", ServiceCategory.LIMPIEZA),
        ("Instalación eléctrica", ServiceCategory.ELECTRICIDAD),
        ("INSTALACION ELECTRICA", ServiceCategory.ELECTRICIDAD),
        ("Reparación de fuga en grifo", ServiceCategory.PLOMERIA),
        ("Plomería general", ServiceCategory.PLOMERIA),
        ("Clases de guitarra", ServiceCategory.OTROS),
    ],
)
def test_classify_service(name, category):
    assert classify_service(name) == category


def test_earliest_bucket_wins_when_keywords_overlap():
    assert classify_service("Limpieza de tubería y revisión eléctrica") == ServiceCategory.LIMPIEZA
    assert classify_service("Fuga en instalación eléctrica") == ServiceCategory.PLOMERIA


def test_classifier_rules_are_replaceable():
    classifier = CategoryClassifier([(ServiceCategory.ELECTRICIDAD, ["Ventanas"])])
    assert classifier.classify("Limpieza de ventanas") == ServiceCategory.ELECTRICIDAD
    assert classifier.classify("Aseo profundo") == ServiceCategory.OTROS


def test_empty_search_returns_whole_catalog_in_order(seeded_store):
    services = CatalogService(seeded_store).list_services("")
    assert [s.id for s in services] == ["s1", "s2", "s3", "s4"]


def test_search_is_case_insensitive_substring(seeded_store):
    catalog = CatalogService(seeded_store)
    assert [s.id for s in catalog.list_services("ASEO")] == ["s1", "s2"]
    assert [s.id for s in catalog.list_services("ventana")] == ["s3"]


def test_category_filter(seeded_store):
    catalog = CatalogService(seeded_store)
    assert len(catalog.list_services("", ServiceCategory.LIMPIEZA)) == 4
    assert catalog.list_services("", "electricidad") == []
    assert len(catalog.list_services("", "todos")) == 4
    assert [s.id for s in catalog.list_services("profundo", "limpieza")] == ["s2"]


def test_no_match_is_an_empty_list(seeded_store):
    assert CatalogService(seeded_store).list_services("jardinería") == []


def test_unknown_category_is_rejected(seeded_store):
    with pytest.raises(InvalidCategory) as excinfo:
        CatalogService(seeded_store).list_services("", "carpinteria")
    assert isinstance(excinfo.value, HomeHubError)
    assert excinfo.value.value == "carpinteria"


def test_category_filter_ignores_case_and_accents(seeded_store):
    catalog = CatalogService(seeded_store)
    assert catalog.list_services("", "Plomería") == []
    assert len(catalog.list_services("", " LIMPIEZA ")) == 4


def test_service_label_falls_back_for_dangling_id(seeded_store):
    catalog = CatalogService(seeded_store)
    assert catalog.service_label("s3") == "Limpieza de ventanas"
    assert catalog.service_label("s404") == "Servicio"


def test_get_service_and_its_category(seeded_store):
    catalog = CatalogService(seeded_store)
    service = catalog.get_service("s2")
    assert service.price == 45000
    assert catalog.category_of(service) == ServiceCategory.LIMPIEZA


def test_get_unknown_service(seeded_store):
    from homehub.errors import NotFound

    with pytest.raises(NotFound):
        CatalogService(seeded_store).get_service("s404")
