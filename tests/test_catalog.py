"""Tests for the catalog of predefined item and buyer names."""

import pytest

from lotledger.domain.catalog import CatalogService
from lotledger.domain.entities import CatalogKind
from lotledger.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def catalog_service(temp_db):
    """Create a CatalogService with a temporary database."""
    return CatalogService(temp_db)


def test_add_and_list_sorted_by_name(catalog_service):
    for name in ("Copper", "Aluminium", "Brass"):
        catalog_service.add_entry(CatalogKind.ITEM, name)

    names = [e.name for e in catalog_service.list_entries(CatalogKind.ITEM)]
    assert names == ["Aluminium", "Brass", "Copper"]


def test_kinds_are_separate(catalog_service):
    catalog_service.add_entry(CatalogKind.ITEM, "Ahmed")
    entry = catalog_service.add_entry(CatalogKind.BUYER, "Ahmed")

    assert entry.kind == CatalogKind.BUYER
    assert [e.id for e in catalog_service.list_entries(CatalogKind.BUYER)] == [entry.id]


def test_duplicate_is_case_insensitive(catalog_service):
    catalog_service.add_entry(CatalogKind.BUYER, "Ahmed")
    with pytest.raises(ConflictError):
        catalog_service.add_entry(CatalogKind.BUYER, " ahmed ")


def test_blank_name_rejected(catalog_service):
    with pytest.raises(ValidationError):
        catalog_service.add_entry(CatalogKind.ITEM, "  ")


def test_match_filter(catalog_service):
    for name in ("Copper wire", "Copper sheet", "Brass"):
        catalog_service.add_entry(CatalogKind.ITEM, name)

    names = [e.name for e in catalog_service.list_entries(CatalogKind.ITEM, match="COPPER")]
    assert names == ["Copper sheet", "Copper wire"]


def test_delete_by_name_or_id(catalog_service):
    copper = catalog_service.add_entry(CatalogKind.ITEM, "Copper")
    catalog_service.add_entry(CatalogKind.ITEM, "Brass")

    catalog_service.delete_entry(CatalogKind.ITEM, copper.id)
    catalog_service.delete_entry(CatalogKind.ITEM, "brass")

    assert catalog_service.list_entries(CatalogKind.ITEM) == []


def test_delete_unknown(catalog_service):
    catalog_service.add_entry(CatalogKind.ITEM, "Copper")
    with pytest.raises(NotFoundError):
        catalog_service.delete_entry(CatalogKind.BUYER, "Copper")
