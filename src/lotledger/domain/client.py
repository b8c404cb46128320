"""Client domain service."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from lotledger.config.logging import get_logger
from lotledger.database.base import Database
from lotledger.domain.balance import compute_client_balance, describe_balance
from lotledger.domain.entities import (
    ArchiveType,
    BalanceView,
    Client as ClientEntity,
    Image,
    Namespace,
    PaymentRequest,
    Transaction,
    TransactionItem,
)
from lotledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    client_name_not_found,
    client_not_found,
    commission_transaction_locked,
    duplicate_client_name,
    transaction_not_found,
)
from lotledger.utils.ids import fresh_id, now as current_time
from lotledger.utils.money import VALUE_PLACES, decimal_places

logger = get_logger(__name__)

SETTLEMENT_NOTE = "تسوية نهائية"

_UNSET = object()


class ClientService:
    """Service for managing clients and their ledgers."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = current_time,
        id_factory: Callable[[], str] = fresh_id,
    ):
        """Initialize client service.

        Args:
            db: Database instance
            clock: Source of the current time
            id_factory: Source of fresh transaction ids
        """
        self.db = db
        self.clock = clock
        self.id_factory = id_factory

    def create_client(self, namespace: Namespace, name: str, phone: Optional[str] = None) -> str:
        """Create a client.

        Args:
            namespace: advances or work
            name: Client name, unique within the namespace
            phone: Optional phone number

        Returns:
            Client ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If the name is already used in the namespace
        """
        name = name.strip()
        if not name:
            raise ValidationError("Client name cannot be empty")
        if self.find_by_name(namespace, name) is not None:
            raise ConflictError(duplicate_client_name(name, namespace.value))
        return self.db.create_client(namespace, ClientEntity(id=None, name=name, phone=phone))

    def get_client(self, namespace: Namespace, client_id: str) -> Optional[ClientEntity]:
        """Get client by ID.

        Args:
            namespace: Namespace to look in
            client_id: Client ID

        Returns:
            Client entity or None if not found
        """
        return self.db.get_client(namespace, client_id)

    def require_client(self, namespace: Namespace, client_id: str) -> ClientEntity:
        """Get client by ID or raise NotFoundError."""
        client = self.db.get_client(namespace, client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def find_by_name(self, namespace: Namespace, name: str) -> Optional[ClientEntity]:
        for client in self.db.list_clients(namespace):
            if client.name == name:
                return client
        return None

    def require_by_name(self, namespace: Namespace, name: str) -> ClientEntity:
        client = self.find_by_name(namespace, name)
        if client is None:
            raise NotFoundError(client_name_not_found(name))
        return client

    def list_clients(
        self, namespace: Namespace, archived: Optional[bool] = False
    ) -> list[ClientEntity]:
        """List clients.

        Args:
            namespace: advances or work
            archived: False for active clients, True for archived ones, None for all

        Returns:
            List of client entities in creation order
        """
        clients = self.db.list_clients(namespace)
        if archived is None:
            return clients
        return [c for c in clients if c.is_archived == archived]

    def client_balance(self, client: ClientEntity) -> BalanceView:
        return describe_balance(client.transactions)

    def rename_client(self, namespace: Namespace, client_id: str, name: str) -> None:
        """Rename a client.

        Buyers are linked to entities by name, so renaming an advances client
        also rewrites ``buyer_name`` on every entity that used the old name.

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If name is blank
            ConflictError: If another client already has the name
        """
        client = self.require_client(namespace, client_id)
        name = name.strip()
        if not name:
            raise ValidationError("Client name cannot be empty")
        other = self.find_by_name(namespace, name)
        if other is not None and other.id != client_id:
            raise ConflictError(duplicate_client_name(name, namespace.value))
        if name == client.name:
            return

        with self.db.unit_of_work():
            self.db.update_client(namespace, client_id, name=name)
            if namespace is Namespace.ADVANCES:
                for entity in self.db.list_entities():
                    if entity.buyer_name == client.name:
                        self.db.update_entity(entity.id, buyer_name=name)
        logger.info("client_renamed", client_id=client_id, old=client.name, new=name)

    def update_phone(self, namespace: Namespace, client_id: str, phone: str) -> None:
        self.require_client(namespace, client_id)
        self.db.update_client(namespace, client_id, phone=phone)

    def delete_client(self, namespace: Namespace, client_id: str) -> None:
        """Delete a client and all its transactions.

        Raises:
            NotFoundError: If the client does not exist
        """
        self.require_client(namespace, client_id)
        self.db.delete_client(namespace, client_id)
        logger.info("client_deleted", client_id=client_id, namespace=namespace.value)

    # Transactions
    def add_purchase(
        self,
        namespace: Namespace,
        client_id: str,
        amount: Optional[Decimal] = None,
        notes: str = "",
        date: Optional[datetime] = None,
        items: Sequence[TransactionItem] = (),
        image: Optional[Image] = None,
    ) -> Transaction:
        """Record a purchase (a debit) on a client's ledger.

        Args:
            namespace: Namespace holding the client
            client_id: Client ID
            amount: Amount owed; when omitted it is the items' quantity times price
            notes: Free text
            date: Transaction date (defaults to now)
            items: Optional line items
            image: Optional attached image

        Returns:
            The stored transaction

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If neither a positive amount nor items are given,
                or an item value has more than VALUE_PLACES decimal places
        """
        client = self.require_client(namespace, client_id)
        for item in items:
            places = max(decimal_places(item.quantity), decimal_places(item.price_per_kilo))
            if places > VALUE_PLACES:
                raise ValidationError(
                    f"Item '{item.name}' quantity and price can have at most "
                    f"{VALUE_PLACES} decimal places"
                )
        if amount is None:
            if not items:
                raise ValidationError("A purchase needs an amount or items")
            amount = sum((item.quantity * item.price_per_kilo for item in items), Decimal("0"))
        if amount <= 0:
            raise ValidationError("Purchase amount must be positive")

        txn = Transaction(
            id=self.id_factory(),
            amount=amount,
            notes=notes,
            date=date or self.clock(),
            is_settled=False,
            items=tuple(items),
            image=image,
        )
        self.db.update_client(namespace, client_id, transactions=client.transactions + (txn,))
        logger.info("purchase_added", client_id=client_id, amount=str(amount))
        return txn

    def edit_transaction(
        self,
        namespace: Namespace,
        client_id: str,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        is_settled: Optional[bool] = None,
        items: Optional[Sequence[TransactionItem]] = None,
        image=_UNSET,
    ) -> Transaction:
        """Edit a user transaction.

        Raises:
            NotFoundError: If the client or transaction does not exist
            ConflictError: If the transaction is a commission
        """
        client = self.require_client(namespace, client_id)
        txn = self._require_user_transaction(client, transaction_id)

        changes = {}
        if amount is not None:
            changes["amount"] = amount
        if notes is not None:
            changes["notes"] = notes
        if date is not None:
            changes["date"] = date
        if is_settled is not None:
            changes["is_settled"] = is_settled
        if items is not None:
            changes["items"] = tuple(items)
        if image is not _UNSET:
            changes["image"] = image
        updated = replace(txn, **changes)

        transactions = tuple(updated if t.id == transaction_id else t for t in client.transactions)
        self.db.update_client(namespace, client_id, transactions=transactions)
        return updated

    def delete_transaction(self, namespace: Namespace, client_id: str, transaction_id: str) -> None:
        """Delete a user transaction.

        Raises:
            NotFoundError: If the client or transaction does not exist
            ConflictError: If the transaction is a commission
        """
        client = self.require_client(namespace, client_id)
        self._require_user_transaction(client, transaction_id)
        transactions = tuple(t for t in client.transactions if t.id != transaction_id)
        self.db.update_client(namespace, client_id, transactions=transactions)
        logger.info("transaction_deleted", client_id=client_id, transaction_id=transaction_id)

    def add_payment(
        self, namespace: Namespace, client_id: str, payment: PaymentRequest
    ) -> Transaction:
        """Record a payment (always a credit) and optionally settle a purchase.

        The payment amount is stored as ``-abs(amount)`` whatever sign was
        given. When ``linked_transaction_id`` is set, that transaction is
        marked settled; its amount is left alone and the two amounts are
        not compared.

        Args:
            namespace: Namespace holding the client
            client_id: Client ID
            payment: Payment data

        Returns:
            The stored payment transaction

        Raises:
            NotFoundError: If the client or the linked transaction does not exist
        """
        client = self.require_client(namespace, client_id)
        transactions = client.transactions

        if payment.linked_transaction_id is not None:
            if not any(t.id == payment.linked_transaction_id for t in transactions):
                raise NotFoundError(
                    transaction_not_found(payment.linked_transaction_id, client_id)
                )
            transactions = tuple(
                replace(t, is_settled=True) if t.id == payment.linked_transaction_id else t
                for t in transactions
            )

        txn = Transaction(
            id=self.id_factory(),
            amount=-abs(Decimal(payment.amount)),
            notes=payment.notes,
            date=payment.date or self.clock(),
            is_settled=True,
            items=(),
            image=payment.image,
        )
        self.db.update_client(namespace, client_id, transactions=transactions + (txn,))
        logger.info(
            "payment_added",
            client_id=client_id,
            amount=str(txn.amount),
            linked_transaction_id=payment.linked_transaction_id,
        )
        return txn

    # Settlement and archive
    def settle_and_archive(self, client_id: str) -> Transaction:
        """Zero a client's balance with a balancing transaction and archive it.

        The archive bucket is the namespace that currently holds the client.

        Returns:
            The balancing transaction

        Raises:
            NotFoundError: If no namespace holds the client
        """
        namespace = self.db.locate_client(client_id)
        if namespace is None:
            raise NotFoundError(client_not_found(client_id))
        client = self.require_client(namespace, client_id)

        total = compute_client_balance(client.transactions)
        settlement = Transaction(
            id=self.id_factory(),
            amount=-total,
            notes=SETTLEMENT_NOTE,
            date=self.clock(),
            is_settled=True,
            items=(),
        )
        self.db.update_client(
            namespace,
            client_id,
            transactions=client.transactions + (settlement,),
            is_archived=True,
            archive_type=ArchiveType(namespace.value),
        )
        logger.info(
            "client_settled", client_id=client_id, namespace=namespace.value, balance=str(total)
        )
        return settlement

    def restore_client(self, client_id: str) -> None:
        """Bring an archived client back. Transactions are not touched.

        Raises:
            NotFoundError: If no namespace holds the client
        """
        namespace = self.db.locate_client(client_id)
        if namespace is None:
            raise NotFoundError(client_not_found(client_id))
        self.db.update_client(namespace, client_id, is_archived=False, clear_archive_type=True)
        logger.info("client_restored", client_id=client_id, namespace=namespace.value)

    def _require_user_transaction(self, client: ClientEntity, transaction_id: str) -> Transaction:
        for txn in client.transactions:
            if txn.id == transaction_id:
                if txn.is_commission:
                    raise ConflictError(commission_transaction_locked(transaction_id))
                return txn
        raise NotFoundError(transaction_not_found(transaction_id, client.id))
