"""Commission reconciliation.

Every entity with a buyer and active (non-archived) lots carries exactly one
commission transaction, on the advances client whose name equals the
entity's ``buyer_name``. Its amount is the negated 0.5% of active lot value.
``CommissionService.sync_buyer_commission`` re-derives that transaction from
the entity's current state and moves, rewrites, creates or removes it.
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from lotledger.config.logging import get_logger
from lotledger.database.base import Database
from lotledger.domain.entities import (
    Client,
    Entity,
    Lot,
    Namespace,
    SyncAction,
    SyncOutcome,
    Transaction,
)
from lotledger.domain.errors import NotFoundError, entity_not_found
from lotledger.utils.date_parser import format_date
from lotledger.utils.ids import fresh_id

logger = get_logger(__name__)

COMMISSION_RATE = Decimal("0.005")
COMMISSION_ID_SUFFIX = "_comm"


def compute_commission(lots: Iterable[Lot]) -> Decimal:
    """0.5% of the total value of lots that are not archived."""
    active_total = sum((lot.total_value for lot in lots if not lot.is_archived), Decimal("0"))
    return COMMISSION_RATE * active_total


def commission_note(auction_date: datetime) -> str:
    return f"عمولة 0.5% عن جلسة بتاريخ {format_date(auction_date)}"


def find_commission(transactions: Iterable[Transaction], entity_id: str) -> Optional[Transaction]:
    """First transaction linked to ``entity_id``, if any."""
    return next((txn for txn in transactions if txn.entity_id == entity_id), None)


class CommissionService:
    """Service keeping commission transactions in step with entities."""

    def __init__(self, db: Database, id_factory: Callable[[], str] = fresh_id):
        """Initialize commission service.

        Args:
            db: Database instance
            id_factory: Source of fresh transaction ids
        """
        self.db = db
        self.id_factory = id_factory

    def sync_buyer_commission(self, entity: Entity) -> SyncOutcome:
        """Reconcile the commission transaction for an entity.

        Scans every advances client for transactions linked to the entity.
        A match on the buyer's client is rewritten (or removed when the
        commission is zero) and the pass stops there. A match on any other
        client is stale and removed, and the scan continues. If the buyer
        had no commission yet, one is appended to the buyer's client, which
        is created when no client has that name.

        All writes happen in one unit of work: on failure nothing is kept.

        Args:
            entity: Current entity state (must have an id)

        Returns:
            SyncOutcome describing what was written

        Raises:
            PersistenceError: If the database write fails
        """
        entity_id = entity.id
        commission = compute_commission(entity.lots)
        note = commission_note(entity.auction_date)
        buyer_name = entity.buyer_name or ""
        log = logger.bind(entity_id=entity_id, buyer=buyer_name, commission=str(commission))

        with self.db.unit_of_work():
            clients = self.db.list_clients(Namespace.ADVANCES)
            stale_client_ids: list[str] = []

            for client in clients:
                existing = find_commission(client.transactions, entity_id)
                if existing is None:
                    continue

                if client.name == buyer_name:
                    if commission > 0:
                        updated = replace(
                            existing,
                            amount=-commission,
                            date=entity.auction_date,
                            notes=note,
                            is_settled=True,
                        )
                        transactions = tuple(
                            updated if txn is existing else txn for txn in client.transactions
                        )
                        self.db.update_client(
                            Namespace.ADVANCES,
                            client.id,
                            transactions=transactions,
                            is_buyer=True,
                        )
                        log.info("commission_updated", client_id=client.id)
                        return SyncOutcome(
                            entity_id=entity_id,
                            commission=commission,
                            action=SyncAction.UPDATED,
                            client_id=client.id,
                            stale_client_ids=tuple(stale_client_ids),
                        )

                    self._strip(client, entity_id)
                    log.info("commission_removed", client_id=client.id)
                    return SyncOutcome(
                        entity_id=entity_id,
                        commission=commission,
                        action=SyncAction.REMOVED,
                        client_id=client.id,
                        stale_client_ids=tuple(stale_client_ids),
                    )

                # Buyer changed: drop it here and keep scanning
                self._strip(client, entity_id)
                stale_client_ids.append(client.id)
                log.info("stale_commission_removed", client_id=client.id)

            if commission <= 0 or not buyer_name:
                return SyncOutcome(
                    entity_id=entity_id,
                    commission=commission,
                    action=SyncAction.REMOVED if stale_client_ids else SyncAction.NONE,
                    stale_client_ids=tuple(stale_client_ids),
                )

            new_txn = Transaction(
                id=f"{self.id_factory()}{COMMISSION_ID_SUFFIX}",
                amount=-commission,
                notes=note,
                date=entity.auction_date,
                is_settled=True,
                items=(),
                entity_id=entity_id,
            )

            buyer = next((c for c in clients if c.name == buyer_name), None)
            if buyer is not None:
                self.db.update_client(
                    Namespace.ADVANCES,
                    buyer.id,
                    transactions=buyer.transactions + (new_txn,),
                    is_buyer=True,
                )
                log.info("commission_created", client_id=buyer.id)
                action = SyncAction.CREATED
                client_id = buyer.id
            else:
                client_id = self.db.create_client(
                    Namespace.ADVANCES,
                    Client(id=None, name=buyer_name, is_buyer=True, transactions=(new_txn,)),
                )
                log.info("buyer_client_created", client_id=client_id)
                action = SyncAction.CREATED_CLIENT

        return SyncOutcome(
            entity_id=entity_id,
            commission=commission,
            action=action,
            client_id=client_id,
            stale_client_ids=tuple(stale_client_ids),
        )

    def sync_entity(self, entity_id: str) -> SyncOutcome:
        """Reload an entity and reconcile its commission."""
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        return self.sync_buyer_commission(entity)

    def _strip(self, client: Client, entity_id: str) -> None:
        """Remove every transaction linked to ``entity_id`` from a client."""
        remaining = tuple(txn for txn in client.transactions if txn.entity_id != entity_id)
        self.db.update_client(Namespace.ADVANCES, client.id, transactions=remaining)
