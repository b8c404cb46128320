"""SQLAlchemy models for lotledger database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from lotledger.utils.money import VALUE_PLACES

Base = declarative_base()

# Lot values, quantities and prices carry at most VALUE_PLACES decimals.
# Ledger amounts hold products of two such values (0.5% commissions,
# quantity x price) without rounding.
Money = Numeric(18, VALUE_PLACES)
LedgerAmount = Numeric(26, 2 * VALUE_PLACES)


def new_document_id() -> str:
    return uuid.uuid4().hex


class Client(Base):
    """Client model. ``namespace`` is 'advances' or 'work'."""

    __tablename__ = "clients"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, default=new_document_id)
    namespace = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    is_buyer = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    archive_type = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="Transaction.position",
    )


class Transaction(Base):
    """Client ledger transaction. ``txn_id`` is the caller-supplied id."""

    __tablename__ = "transactions"

    pk = Column(Integer, primary_key=True)
    txn_id = Column(String, nullable=False)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False)
    position = Column(Integer, nullable=False)
    amount = Column(LedgerAmount, nullable=False)
    notes = Column(String, nullable=False, default="")
    date = Column(DateTime, nullable=False)
    is_settled = Column(Boolean, default=False, nullable=False)
    entity_id = Column(String, nullable=True)
    image_name = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    __table_args__ = (Index("ix_transactions_entity_id", "entity_id"),)

    # Relationships
    client = relationship("Client", back_populates="transactions")
    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.position",
    )


class TransactionItem(Base):
    """Line item of a purchase transaction."""

    __tablename__ = "transaction_items"

    pk = Column(Integer, primary_key=True)
    item_id = Column(String, nullable=False)
    transaction_pk = Column(Integer, ForeignKey("transactions.pk"), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    quantity = Column(Money, nullable=False)
    price_per_kilo = Column(Money, nullable=False)
    image_name = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="items")


class Entity(Base):
    """Auction entity model."""

    __tablename__ = "entities"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, default=new_document_id)
    name = Column(String, nullable=False)
    buyer_name = Column(String, nullable=True)
    auction_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lots = relationship(
        "Lot",
        back_populates="entity",
        cascade="all, delete-orphan",
        order_by="Lot.position",
    )


class Lot(Base):
    """Lot model with flattened payment and loading details."""

    __tablename__ = "lots"

    pk = Column(Integer, primary_key=True)
    lot_id = Column(String, nullable=False)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    position = Column(Integer, nullable=False)
    lot_number = Column(String, nullable=False, default="")
    name = Column(String, nullable=False)
    quantity = Column(String, nullable=False, default="")
    total_value = Column(Money, nullable=False)
    value30 = Column(Money, nullable=False)
    value70 = Column(Money, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    is_70_paid = Column(Boolean, default=False, nullable=False)
    payer_name = Column(String, nullable=True)
    payment_date = Column(DateTime, nullable=True)
    receipt_image_name = Column(String, nullable=True)
    receipt_image_url = Column(String, nullable=True)
    loader_name = Column(String, nullable=True)
    loading_date = Column(DateTime, nullable=True)
    contract_image_name = Column(String, nullable=True)
    contract_image_url = Column(String, nullable=True)

    # Relationships
    entity = relationship("Entity", back_populates="lots")


class CatalogEntry(Base):
    """Predefined item or buyer name. ``kind`` is 'item' or 'buyer'."""

    __tablename__ = "catalog_entries"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, default=new_document_id)
    kind = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("kind", "name", name="uq_catalog_kind_name"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
