"""CLI helpers for reference resolution and error handling."""

from __future__ import annotations

import click
from lotledger.cli.error_handling import handle_domain_error
from lotledger.domain.client import ClientService
from lotledger.domain.entities import Namespace
from lotledger.domain.entity import EntityService
from lotledger.domain.errors import DomainError
from lotledger.utils.resolvers import resolve_client, resolve_entity


def namespace_from_flag(work: bool) -> Namespace:
    return Namespace.WORK if work else Namespace.ADVANCES


def resolve_client_or_exit(
    ctx: click.Context, client_service: ClientService, namespace: Namespace, client: str
) -> str:
    """Resolve client name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_client(client_service, namespace, client)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_entity_or_exit(
    ctx: click.Context, entity_service: EntityService, entity: str
) -> str:
    """Resolve entity name or ID, or exit with a CLI error."""
    try:
        return resolve_entity(entity_service, entity)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
