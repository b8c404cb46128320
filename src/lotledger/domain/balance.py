"""Balance engine.

Pure functions over transaction and lot lists. Nothing here reads or writes
the database; balances are always recomputed from raw transactions.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from lotledger.domain.entities import (
    BalanceLabel,
    BalanceView,
    Client,
    DeadlineStatus,
    Entity,
    EntityAggregates,
    FinancialSummary,
    Lot,
    Transaction,
    UpcomingDeadline,
)
from lotledger.utils.date_parser import days_between

PAYMENT_WINDOW = timedelta(days=15)
PENDING_WINDOW_DAYS = 5

ZERO = Decimal("0")


def compute_client_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of transaction amounts. Positive means the client owes."""
    return sum((Decimal(t.amount) for t in transactions), ZERO)


def balance_label(balance: Decimal) -> BalanceLabel:
    """Zero and positive balances are debits, negative ones credits."""
    return BalanceLabel.DEBIT if balance >= 0 else BalanceLabel.CREDIT


def describe_balance(transactions: Iterable[Transaction]) -> BalanceView:
    balance = compute_client_balance(transactions)
    return BalanceView(amount=balance, label=balance_label(balance), magnitude=abs(balance))


def compute_entity_aggregates(lots: Sequence[Lot], active_only: bool = True) -> EntityAggregates:
    """Totals over an entity's lots.

    Args:
        lots: Lots of one entity
        active_only: If True, archived (loaded) lots are left out of every total

    Returns:
        EntityAggregates; ``remaining70`` only counts lots whose 70% is unpaid
    """
    selected = [lot for lot in lots if not (active_only and lot.is_archived)]
    return EntityAggregates(
        total_value=sum((lot.total_value for lot in selected), ZERO),
        total30=sum((lot.value30 for lot in selected), ZERO),
        total70=sum((lot.value70 for lot in selected), ZERO),
        remaining70=sum((lot.value70 for lot in selected if not lot.is_70_paid), ZERO),
    )


def compute_financial_summary(clients: Iterable[Client]) -> FinancialSummary:
    """Dashboard totals: positive balances add to debit, negative ones to credit."""
    total_debit = ZERO
    total_credit = ZERO
    for client in clients:
        balance = compute_client_balance(client.transactions)
        if balance > 0:
            total_debit += balance
        elif balance < 0:
            total_credit += -balance
    return FinancialSummary(
        total_debit=total_debit,
        total_credit=total_credit,
        net_balance=total_debit - total_credit,
    )


def payment_deadline(entity: Entity) -> datetime:
    return entity.auction_date + PAYMENT_WINDOW


def deadline_status(deadline: datetime, now: datetime) -> DeadlineStatus:
    if deadline < now:
        return DeadlineStatus.OVERDUE
    if days_between(now, deadline) <= PENDING_WINDOW_DAYS:
        return DeadlineStatus.PENDING
    return DeadlineStatus.UPCOMING


def compute_upcoming_deadline(
    entities: Iterable[Entity],
    now: Optional[datetime] = None,
    include_overdue: bool = False,
) -> Optional[UpcomingDeadline]:
    """Find the unpaid lot whose 70% payment falls due first.

    The deadline of every lot in an entity is the auction date plus 15 days.
    By default entities whose deadline has already passed are skipped
    entirely; pass ``include_overdue=True`` to consider them as well, in
    which case the most overdue lot wins.

    Args:
        entities: Entities to scan
        now: Reference time (defaults to the current time)
        include_overdue: Also consider deadlines in the past

    Returns:
        UpcomingDeadline for the earliest qualifying lot, or None
    """
    now = now or datetime.now()
    best: Optional[tuple[datetime, Entity, Lot]] = None
    for entity in entities:
        deadline = payment_deadline(entity)
        if not include_overdue and deadline <= now:
            continue
        for lot in entity.lots:
            if lot.is_70_paid:
                continue
            # Ties keep the first lot seen
            if best is None or deadline < best[0]:
                best = (deadline, entity, lot)

    if best is None:
        return None
    deadline, entity, lot = best
    return UpcomingDeadline(
        entity=entity,
        lot=lot,
        deadline=deadline,
        status=deadline_status(deadline, now),
    )
