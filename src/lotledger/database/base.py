"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from lotledger.domain.entities import (
    ArchiveType,
    CatalogEntry,
    CatalogKind,
    Client,
    Entity,
    Lot,
    Namespace,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for lotledger.

    List-valued fields (``transactions`` on clients, ``lots`` on entities) are
    always written whole: callers compute the complete new tuple and the
    implementation replaces the stored list with it, preserving order.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes so they commit together or not at all.

        Nested use joins the outer unit of work.
        """
        pass

    # Client operations
    @abstractmethod
    def create_client(self, namespace: Namespace, client: Client) -> str:
        """Create a client in a namespace. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, namespace: Namespace, client_id: str) -> Optional[Client]:
        """Get client by ID within a namespace."""
        pass

    @abstractmethod
    def list_clients(self, namespace: Namespace) -> list[Client]:
        """List all clients of a namespace in creation order."""
        pass

    @abstractmethod
    def locate_client(self, client_id: str) -> Optional[Namespace]:
        """Return the namespace that holds ``client_id``, or None."""
        pass

    @abstractmethod
    def update_client(
        self,
        namespace: Namespace,
        client_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        transactions: Optional[tuple[Transaction, ...]] = None,
        is_buyer: Optional[bool] = None,
        is_archived: Optional[bool] = None,
        archive_type: Optional[ArchiveType] = None,
        clear_archive_type: bool = False,
    ) -> None:
        """Update client fields.

        Args:
            transactions: Full replacement transaction list
            clear_archive_type: If True, delete the archive type field
        """
        pass

    @abstractmethod
    def delete_client(self, namespace: Namespace, client_id: str) -> None:
        """Delete a client and its transactions."""
        pass

    # Entity operations
    @abstractmethod
    def create_entity(self, entity: Entity) -> str:
        """Create an entity. Returns entity ID."""
        pass

    @abstractmethod
    def get_entity(self, entity_id: str) -> Optional[Entity]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def list_entities(self) -> list[Entity]:
        """List all entities, newest auction first."""
        pass

    @abstractmethod
    def update_entity(
        self,
        entity_id: str,
        name: Optional[str] = None,
        buyer_name: Optional[str] = None,
        auction_date: Optional[datetime] = None,
        lots: Optional[tuple[Lot, ...]] = None,
        clear_buyer: bool = False,
    ) -> None:
        """Update entity fields.

        Args:
            lots: Full replacement lot list
            clear_buyer: If True, remove the buyer name
        """
        pass

    @abstractmethod
    def delete_entity(self, entity_id: str) -> None:
        """Delete an entity and its lots."""
        pass

    # Catalog operations
    @abstractmethod
    def create_catalog_entry(self, kind: CatalogKind, name: str) -> str:
        """Add a predefined item or buyer name. Returns entry ID."""
        pass

    @abstractmethod
    def list_catalog_entries(self, kind: CatalogKind) -> list[CatalogEntry]:
        """List catalog entries of one kind, ordered by name."""
        pass

    @abstractmethod
    def delete_catalog_entry(self, kind: CatalogKind, entry_id: str) -> None:
        """Remove a catalog entry."""
        pass
