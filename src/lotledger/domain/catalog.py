"""Catalog of predefined item and buyer names."""

from typing import Optional

from lotledger.config.logging import get_logger
from lotledger.database.base import Database
from lotledger.domain.entities import CatalogEntry, CatalogKind
from lotledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    catalog_entry_not_found,
    duplicate_catalog_entry,
)

logger = get_logger(__name__)


class CatalogService:
    """Service for managing predefined item and buyer names."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_entry(self, kind: CatalogKind, name: str) -> CatalogEntry:
        """Add a name to the catalog.

        Names are compared case-insensitively within a kind.

        Raises:
            ValidationError: If name is blank
            ConflictError: If the name is already present
        """
        name = name.strip()
        if not name:
            raise ValidationError(f"{kind.value.capitalize()} name cannot be empty")
        if self.find_entry(kind, name) is not None:
            raise ConflictError(duplicate_catalog_entry(kind.value, name))

        entry_id = self.db.create_catalog_entry(kind, name)
        logger.info("catalog_entry_added", kind=kind.value, name=name)
        return CatalogEntry(id=entry_id, kind=kind, name=name)

    def find_entry(self, kind: CatalogKind, name: str) -> Optional[CatalogEntry]:
        wanted = name.strip().casefold()
        for entry in self.db.list_catalog_entries(kind):
            if entry.name.casefold() == wanted:
                return entry
        return None

    def list_entries(self, kind: CatalogKind, match: Optional[str] = None) -> list[CatalogEntry]:
        """List catalog names of one kind.

        Args:
            kind: item or buyer
            match: Optional case-insensitive substring filter

        Returns:
            Entries ordered by name
        """
        entries = self.db.list_catalog_entries(kind)
        if not match:
            return entries
        needle = match.strip().casefold()
        return [e for e in entries if needle in e.name.casefold()]

    def delete_entry(self, kind: CatalogKind, entry: str) -> None:
        """Remove a catalog entry by ID or name.

        Raises:
            NotFoundError: If no entry matches
        """
        for candidate in self.db.list_catalog_entries(kind):
            if candidate.id == entry:
                break
        else:
            candidate = self.find_entry(kind, entry)
            if candidate is None:
                raise NotFoundError(catalog_entry_not_found(kind.value, entry))

        self.db.delete_catalog_entry(kind, candidate.id)
        logger.info("catalog_entry_deleted", kind=kind.value, name=candidate.name)
