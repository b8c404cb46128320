"""Mapper functions to convert between domain models and SQLAlchemy models.

Reads go ORM -> domain. Writes go domain -> ORM and only ever build whole
child lists (transactions, items, lots); existing child rows are replaced,
never patched.
"""

from decimal import Decimal
from typing import Optional

from lotledger.domain import entities as domain
from lotledger.database.models import (
    CatalogEntry as ORMCatalogEntry,
    Client as ORMClient,
    Entity as ORMEntity,
    Lot as ORMLot,
    Transaction as ORMTransaction,
    TransactionItem as ORMTransactionItem,
)


def _image(name: Optional[str], url: Optional[str]) -> Optional[domain.Image]:
    if name is None and url is None:
        return None
    return domain.Image(name=name or "", url=url or "")


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def transaction_item_to_domain(orm_item: ORMTransactionItem) -> domain.TransactionItem:
    """Convert SQLAlchemy TransactionItem model to domain TransactionItem entity."""
    return domain.TransactionItem(
        id=orm_item.item_id,
        name=orm_item.name,
        quantity=_decimal(orm_item.quantity),
        price_per_kilo=_decimal(orm_item.price_per_kilo),
        image=_image(orm_item.image_name, orm_item.image_url),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.txn_id,
        amount=_decimal(orm_transaction.amount),
        notes=orm_transaction.notes or "",
        date=orm_transaction.date,
        is_settled=orm_transaction.is_settled,
        items=tuple(transaction_item_to_domain(item) for item in orm_transaction.items),
        entity_id=orm_transaction.entity_id,
        image=_image(orm_transaction.image_name, orm_transaction.image_url),
    )


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    archive_type = None
    if orm_client.archive_type is not None:
        archive_type = domain.ArchiveType(orm_client.archive_type)
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        transactions=tuple(transaction_to_domain(txn) for txn in orm_client.transactions),
        phone=orm_client.phone,
        is_buyer=orm_client.is_buyer,
        is_archived=orm_client.is_archived,
        archive_type=archive_type,
    )


def lot_to_domain(orm_lot: ORMLot) -> domain.Lot:
    """Convert SQLAlchemy Lot model to domain Lot entity."""
    payment_details = None
    if orm_lot.payer_name is not None:
        payment_details = domain.PaymentDetails(
            payer_name=orm_lot.payer_name,
            date=orm_lot.payment_date,
            receipt_image=_image(orm_lot.receipt_image_name, orm_lot.receipt_image_url),
        )
    loading_details = None
    if orm_lot.loader_name is not None:
        loading_details = domain.LoadingDetails(
            loader_name=orm_lot.loader_name,
            date=orm_lot.loading_date,
        )
    return domain.Lot(
        id=orm_lot.lot_id,
        lot_number=orm_lot.lot_number,
        name=orm_lot.name,
        quantity=orm_lot.quantity,
        total_value=_decimal(orm_lot.total_value),
        value30=_decimal(orm_lot.value30),
        value70=_decimal(orm_lot.value70),
        is_archived=orm_lot.is_archived,
        is_70_paid=orm_lot.is_70_paid,
        payment_details=payment_details,
        loading_details=loading_details,
        contract_image=_image(orm_lot.contract_image_name, orm_lot.contract_image_url),
    )


def entity_to_domain(orm_entity: ORMEntity) -> domain.Entity:
    """Convert SQLAlchemy Entity model to domain Entity entity."""
    return domain.Entity(
        id=orm_entity.id,
        name=orm_entity.name,
        auction_date=orm_entity.auction_date,
        buyer_name=orm_entity.buyer_name,
        lots=tuple(lot_to_domain(lot) for lot in orm_entity.lots),
    )


def catalog_entry_to_domain(orm_entry: ORMCatalogEntry) -> domain.CatalogEntry:
    """Convert SQLAlchemy CatalogEntry model to domain CatalogEntry entity."""
    return domain.CatalogEntry(
        id=orm_entry.id,
        kind=domain.CatalogKind(orm_entry.kind),
        name=orm_entry.name,
    )


def transaction_to_orm(txn: domain.Transaction, position: int) -> ORMTransaction:
    """Build a new SQLAlchemy Transaction row from a domain Transaction."""
    return ORMTransaction(
        txn_id=txn.id,
        position=position,
        amount=txn.amount,
        notes=txn.notes,
        date=txn.date,
        is_settled=txn.is_settled,
        entity_id=txn.entity_id,
        image_name=txn.image.name if txn.image else None,
        image_url=txn.image.url if txn.image else None,
        items=[
            ORMTransactionItem(
                item_id=item.id,
                position=index,
                name=item.name,
                quantity=item.quantity,
                price_per_kilo=item.price_per_kilo,
                image_name=item.image.name if item.image else None,
                image_url=item.image.url if item.image else None,
            )
            for index, item in enumerate(txn.items)
        ],
    )


def lot_to_orm(lot: domain.Lot, position: int) -> ORMLot:
    """Build a new SQLAlchemy Lot row from a domain Lot."""
    payment = lot.payment_details
    receipt = payment.receipt_image if payment else None
    loading = lot.loading_details
    return ORMLot(
        lot_id=lot.id,
        position=position,
        lot_number=lot.lot_number,
        name=lot.name,
        quantity=lot.quantity,
        total_value=lot.total_value,
        value30=lot.value30,
        value70=lot.value70,
        is_archived=lot.is_archived,
        is_70_paid=lot.is_70_paid,
        payer_name=payment.payer_name if payment else None,
        payment_date=payment.date if payment else None,
        receipt_image_name=receipt.name if receipt else None,
        receipt_image_url=receipt.url if receipt else None,
        loader_name=loading.loader_name if loading else None,
        loading_date=loading.date if loading else None,
        contract_image_name=lot.contract_image.name if lot.contract_image else None,
        contract_image_url=lot.contract_image.url if lot.contract_image else None,
    )
