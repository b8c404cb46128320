"""Domain model entities for lotledger.

These are pure data classes representing business concepts, independent of
database schema. Services build new instances with ``dataclasses.replace``
instead of mutating them, and always hand whole ``transactions``/``lots``
tuples back to the database.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class Namespace(str, Enum):
    """Client collection. The two namespaces never share a client id."""

    ADVANCES = "advances"
    WORK = "work"


class ArchiveType(str, Enum):
    """Archive bucket a client was moved to."""

    ADVANCES = "advances"
    WORK = "work"
    ENTITIES = "entities"


class BalanceLabel(str, Enum):
    """Display label for a signed balance."""

    DEBIT = "debit"
    CREDIT = "credit"


class DeadlineStatus(str, Enum):
    """Status tag for the next-payment-due card."""

    OVERDUE = "overdue"
    PENDING = "pending"
    UPCOMING = "upcoming"


class SyncAction(str, Enum):
    """What a commission reconciliation pass ended up doing."""

    UPDATED = "updated"
    REMOVED = "removed"
    CREATED = "created"
    CREATED_CLIENT = "created_client"
    NONE = "none"


class CatalogKind(str, Enum):
    """Kind of name kept in the catalog for quick entry."""

    ITEM = "item"
    BUYER = "buyer"


@dataclass(frozen=True)
class Image:
    """Uploaded image reference."""

    name: str
    url: str


@dataclass(frozen=True)
class TransactionItem:
    """Line item on a purchase transaction."""

    id: str
    name: str
    quantity: Decimal
    price_per_kilo: Decimal
    image: Optional[Image] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction.

    Positive amounts are debits (the client owes), negative amounts are
    credits. A transaction with ``entity_id`` set is a commission owned by
    the reconciliation engine.
    """

    id: str
    amount: Decimal
    notes: str
    date: datetime
    is_settled: bool = False
    items: tuple[TransactionItem, ...] = ()
    entity_id: Optional[str] = None
    image: Optional[Image] = None

    @property
    def is_commission(self) -> bool:
        return self.entity_id is not None


@dataclass(frozen=True)
class Client:
    """Client domain entity. ``transactions`` is the only source of its balance."""

    id: Optional[str]
    name: str
    transactions: tuple[Transaction, ...] = ()
    phone: Optional[str] = None
    is_buyer: bool = False
    is_archived: bool = False
    archive_type: Optional[ArchiveType] = None


@dataclass(frozen=True)
class PaymentDetails:
    """Who paid the 70% remainder of a lot, and when."""

    payer_name: str
    date: datetime
    receipt_image: Optional[Image] = None


@dataclass(frozen=True)
class LoadingDetails:
    """Who loaded a lot, and when."""

    loader_name: str
    date: datetime


@dataclass(frozen=True)
class Lot:
    """Purchased batch inside an entity, paid 30% up front and 70% later."""

    id: str
    lot_number: str
    name: str
    quantity: str
    total_value: Decimal
    value30: Decimal
    value70: Decimal
    is_archived: bool = False
    is_70_paid: bool = False
    payment_details: Optional[PaymentDetails] = None
    loading_details: Optional[LoadingDetails] = None
    contract_image: Optional[Image] = None


@dataclass(frozen=True)
class Entity:
    """Auction session. ``buyer_name`` links to a client by exact name."""

    id: Optional[str]
    name: str
    auction_date: datetime
    buyer_name: Optional[str] = None
    lots: tuple[Lot, ...] = ()


@dataclass(frozen=True)
class CatalogEntry:
    """A predefined item or buyer name."""

    id: str
    kind: CatalogKind
    name: str


@dataclass(frozen=True)
class PaymentRequest:
    """Input for recording a payment against a client."""

    amount: Decimal
    notes: str = ""
    date: Optional[datetime] = None
    linked_transaction_id: Optional[str] = None
    image: Optional[Image] = None


@dataclass(frozen=True)
class BalanceView:
    """Signed balance plus how it is shown."""

    amount: Decimal
    label: BalanceLabel
    magnitude: Decimal


@dataclass(frozen=True)
class EntityAggregates:
    """Totals over an entity's lots."""

    total_value: Decimal
    total30: Decimal
    total70: Decimal
    remaining70: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    """Dashboard totals across a set of clients."""

    total_debit: Decimal
    total_credit: Decimal
    net_balance: Decimal


@dataclass(frozen=True)
class UpcomingDeadline:
    """The lot whose 70% payment is due next."""

    entity: Entity
    lot: Lot
    deadline: datetime
    status: DeadlineStatus


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one commission reconciliation pass."""

    entity_id: str
    commission: Decimal
    action: SyncAction
    client_id: Optional[str] = None
    stale_client_ids: tuple[str, ...] = field(default_factory=tuple)
