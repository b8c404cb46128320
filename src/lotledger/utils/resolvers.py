"""Utilities for resolving client and entity references to IDs."""

from lotledger.domain.client import ClientService
from lotledger.domain.entities import Namespace
from lotledger.domain.entity import EntityService
from lotledger.domain.errors import NotFoundError


def resolve_client(client_service: ClientService, namespace: Namespace, client: str) -> str:
    """Resolve client name or ID to client ID.

    Args:
        client_service: ClientService instance
        namespace: Namespace to search
        client: Client ID or exact client name

    Returns:
        Client ID

    Raises:
        NotFoundError: If client is not found
    """
    if client_service.get_client(namespace, client) is not None:
        return client

    found = client_service.find_by_name(namespace, client)
    if found is not None:
        return found.id

    raise NotFoundError(f"Client '{client}' not found in {namespace.value}")


def resolve_entity(entity_service: EntityService, entity: str) -> str:
    """Resolve entity name or ID to entity ID.

    Raises:
        NotFoundError: If entity is not found
    """
    if entity_service.get_entity(entity) is not None:
        return entity

    found = entity_service.find_by_name(entity)
    if found is not None:
        return found.id

    raise NotFoundError(f"Entity '{entity}' not found")
