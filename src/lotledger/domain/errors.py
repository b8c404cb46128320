"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested client, entity, lot or transaction does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as duplicate client names."""


class PersistenceError(DomainError):
    """The storage layer failed to read or write."""


class ReconciliationError(DomainError):
    """A mutation was applied but the commission pass that follows it failed.

    The commission pass itself is atomic, so the ledgers are left as they were
    before it started. Running the pass again for ``entity_id`` repairs them.
    """

    def __init__(self, entity_id: str, cause: Exception):
        self.entity_id = entity_id
        self.cause = cause
        super().__init__(
            f"Change saved, but commission sync for entity {entity_id} failed: {cause}"
        )


def client_not_found(client_id: str) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def client_name_not_found(name: str) -> str:
    """Return message for missing client by name."""
    return f"Client '{name}' not found"


def duplicate_client_name(name: str, namespace: str) -> str:
    """Return message for a client name already used in a namespace."""
    return f"Client with name '{name}' already exists in {namespace}"


def entity_not_found(entity_id: str) -> str:
    """Return message for missing entity."""
    return f"Entity {entity_id} not found"


def lot_not_found(lot_id: str, entity_id: str) -> str:
    return f"Lot {lot_id} not found in entity {entity_id}"


def transaction_not_found(transaction_id: str, client_id: str) -> str:
    return f"Transaction {transaction_id} not found for client {client_id}"


def commission_transaction_locked(transaction_id: str) -> str:
    """Return message for an attempt to hand-edit a commission transaction."""
    return (
        f"Transaction {transaction_id} is a commission managed by entity sync. "
        "Edit the entity or its lots instead."
    )


def catalog_entry_not_found(kind: str, entry: str) -> str:
    return f"No {kind} named or with ID '{entry}' in the catalog"


def duplicate_catalog_entry(kind: str, name: str) -> str:
    """Return message for a catalog name that is already present."""
    return f"{kind.capitalize()} '{name}' is already in the catalog"
