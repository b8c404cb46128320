"""Entity and lot domain service.

Every mutation that can change an entity's commission (lot add, edit,
delete, archive toggle, loading, buyer or date change) is saved first and
then followed by a commission reconciliation pass. If that pass fails the
mutation stays saved and ``ReconciliationError`` is raised.
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from lotledger.config.logging import get_logger
from lotledger.database.base import Database
from lotledger.domain.commission import CommissionService
from lotledger.domain.entities import (
    Entity as EntityEntity,
    Image,
    LoadingDetails,
    Lot,
    PaymentDetails,
    SyncOutcome,
)
from lotledger.domain.errors import (
    DomainError,
    NotFoundError,
    ReconciliationError,
    ValidationError,
    entity_not_found,
    lot_not_found,
)
from lotledger.utils.ids import fresh_id
from lotledger.utils.lot_numbers import lot_number_sort_key
from lotledger.utils.money import VALUE_PLACES, decimal_places

logger = get_logger(__name__)

_UNSET = object()


def is_entity_archived(entity: EntityEntity) -> bool:
    """An entity belongs in the archive once it has lots and all are archived."""
    return bool(entity.lots) and all(lot.is_archived for lot in entity.lots)


def sorted_lots(entity: EntityEntity) -> list[Lot]:
    """Lots in natural lot-number order."""
    return sorted(entity.lots, key=lambda lot: lot_number_sort_key(lot.lot_number))


def split_values(
    total_value: Decimal, value30: Decimal, value70: Optional[Decimal] = None
) -> tuple[Decimal, Decimal]:
    """Validate the 30/70 split, deriving value70 when it is not given.

    Raises:
        ValidationError: If values are negative, value30 exceeds the total,
            or value70 does not equal total_value - value30, or a value
            has more than VALUE_PLACES decimal places
    """
    if total_value < 0 or value30 < 0:
        raise ValidationError("Lot values cannot be negative")
    for value in (total_value, value30, value70):
        if value is not None and decimal_places(value) > VALUE_PLACES:
            raise ValidationError(
                f"Lot values can have at most {VALUE_PLACES} decimal places, got {value}"
            )
    if value30 > total_value:
        raise ValidationError("value30 cannot exceed the lot total value")
    expected70 = total_value - value30
    if value70 is None:
        return value30, expected70
    if value70 != expected70:
        raise ValidationError(
            f"value70 must equal total_value - value30 ({expected70}), got {value70}"
        )
    return value30, value70


class EntityService:
    """Service for managing auction entities and their lots."""

    def __init__(
        self,
        db: Database,
        commission_service: Optional[CommissionService] = None,
        id_factory: Callable[[], str] = fresh_id,
    ):
        """Initialize entity service.

        Args:
            db: Database instance
            commission_service: Reconciliation engine (built from db if omitted)
            id_factory: Source of fresh lot ids
        """
        self.db = db
        self.commission_service = commission_service or CommissionService(db)
        self.id_factory = id_factory

    # Entities
    def create_entity(
        self, name: str, auction_date: datetime, buyer_name: Optional[str] = None
    ) -> str:
        """Create an entity with no lots.

        Raises:
            ValidationError: If name is blank
        """
        name = name.strip()
        if not name:
            raise ValidationError("Entity name cannot be empty")
        buyer_name = buyer_name.strip() if buyer_name else None
        entity_id = self.db.create_entity(
            EntityEntity(id=None, name=name, auction_date=auction_date, buyer_name=buyer_name or None)
        )
        logger.info("entity_created", entity_id=entity_id, buyer=buyer_name)
        return entity_id

    def get_entity(self, entity_id: str) -> Optional[EntityEntity]:
        return self.db.get_entity(entity_id)

    def require_entity(self, entity_id: str) -> EntityEntity:
        """Get entity by ID or raise NotFoundError."""
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        return entity

    def find_by_name(self, name: str) -> Optional[EntityEntity]:
        for entity in self.db.list_entities():
            if entity.name == name:
                return entity
        return None

    def list_entities(self, archived: Optional[bool] = False) -> list[EntityEntity]:
        """List entities.

        Args:
            archived: False for active entities, True for fully archived ones, None for all
        """
        entities = self.db.list_entities()
        if archived is None:
            return entities
        return [e for e in entities if is_entity_archived(e) == archived]

    def update_entity(
        self,
        entity_id: str,
        name: Optional[str] = None,
        buyer_name=_UNSET,
        auction_date: Optional[datetime] = None,
    ) -> SyncOutcome:
        """Update entity fields and reconcile its commission.

        Args:
            entity_id: Entity ID
            name: New name
            buyer_name: New buyer name; None or "" removes the buyer
            auction_date: New auction date

        Raises:
            NotFoundError: If the entity does not exist
            ReconciliationError: If the update was saved but reconciliation failed
        """
        self.require_entity(entity_id)
        clear_buyer = False
        new_buyer = None
        if buyer_name is not _UNSET:
            new_buyer = buyer_name.strip() if buyer_name else None
            clear_buyer = new_buyer is None

        self.db.update_entity(
            entity_id,
            name=name,
            buyer_name=new_buyer,
            auction_date=auction_date,
            clear_buyer=clear_buyer,
        )
        logger.info("entity_updated", entity_id=entity_id)
        return self._resync(entity_id)

    def delete_entity(self, entity_id: str) -> None:
        """Delete an entity and its lots.

        The commission transaction it produced is left on the buyer's ledger.

        Raises:
            NotFoundError: If the entity does not exist
        """
        self.require_entity(entity_id)
        self.db.delete_entity(entity_id)
        logger.info("entity_deleted", entity_id=entity_id)

    # Lots
    def add_lot(
        self,
        entity_id: str,
        lot_number: str,
        name: str,
        total_value: Decimal,
        value30: Decimal,
        value70: Optional[Decimal] = None,
        quantity: str = "",
        contract_image: Optional[Image] = None,
    ) -> Lot:
        """Append a lot to an entity and reconcile its commission.

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If the 30/70 split is inconsistent
            ReconciliationError: If the lot was saved but reconciliation failed
        """
        entity = self.require_entity(entity_id)
        value30, value70 = split_values(total_value, value30, value70)
        lot = Lot(
            id=self.id_factory(),
            lot_number=lot_number,
            name=name,
            quantity=quantity,
            total_value=total_value,
            value30=value30,
            value70=value70,
            contract_image=contract_image,
        )
        self.db.update_entity(entity_id, lots=entity.lots + (lot,))
        logger.info("lot_added", entity_id=entity_id, lot_id=lot.id, total_value=str(total_value))
        self._resync(entity_id)
        return lot

    def update_lot(
        self,
        entity_id: str,
        lot_id: str,
        lot_number: Optional[str] = None,
        name: Optional[str] = None,
        quantity: Optional[str] = None,
        total_value: Optional[Decimal] = None,
        value30: Optional[Decimal] = None,
        value70: Optional[Decimal] = None,
        contract_image=_UNSET,
    ) -> Lot:
        """Edit a lot and reconcile the entity's commission.

        When either value changes, value70 is re-derived unless given.

        Raises:
            NotFoundError: If the entity or lot does not exist
            ValidationError: If the 30/70 split is inconsistent
            ReconciliationError: If the edit was saved but reconciliation failed
        """
        entity = self.require_entity(entity_id)
        lot = self._require_lot(entity, lot_id)

        changes = {}
        if lot_number is not None:
            changes["lot_number"] = lot_number
        if name is not None:
            changes["name"] = name
        if quantity is not None:
            changes["quantity"] = quantity
        if contract_image is not _UNSET:
            changes["contract_image"] = contract_image
        if total_value is not None or value30 is not None or value70 is not None:
            new_total = total_value if total_value is not None else lot.total_value
            new30 = value30 if value30 is not None else lot.value30
            new30, new70 = split_values(new_total, new30, value70)
            changes.update(total_value=new_total, value30=new30, value70=new70)

        updated = replace(lot, **changes)
        self._save_lot(entity, updated)
        logger.info("lot_updated", entity_id=entity_id, lot_id=lot_id)
        self._resync(entity_id)
        return updated

    def delete_lot(self, entity_id: str, lot_id: str) -> None:
        """Remove a lot and reconcile the entity's commission.

        Raises:
            NotFoundError: If the entity or lot does not exist
            ReconciliationError: If the delete was saved but reconciliation failed
        """
        entity = self.require_entity(entity_id)
        self._require_lot(entity, lot_id)
        self.db.update_entity(entity_id, lots=tuple(other for other in entity.lots if other.id != lot_id))
        logger.info("lot_deleted", entity_id=entity_id, lot_id=lot_id)
        self._resync(entity_id)

    def toggle_lot_archive(self, entity_id: str, lot_id: str) -> Lot:
        """Flip a lot's archived flag and reconcile the entity's commission."""
        entity = self.require_entity(entity_id)
        lot = self._require_lot(entity, lot_id)
        updated = replace(lot, is_archived=not lot.is_archived)
        self._save_lot(entity, updated)
        logger.info("lot_archive_toggled", entity_id=entity_id, lot_id=lot_id, archived=updated.is_archived)
        self._resync(entity_id)
        return updated

    def mark_lot_loaded(
        self, entity_id: str, lot_id: str, loader_name: str, date: datetime
    ) -> Lot:
        """Record loading details and archive the lot.

        Loading archives the lot like any other archive action, so the
        commission is reconciled here too and stops counting the lot.

        Raises:
            NotFoundError: If the entity or lot does not exist
            ValidationError: If loader_name is blank
            ReconciliationError: If the change was saved but reconciliation failed
        """
        if not loader_name or not loader_name.strip():
            raise ValidationError("Loader name cannot be empty")
        entity = self.require_entity(entity_id)
        lot = self._require_lot(entity, lot_id)
        updated = replace(
            lot,
            is_archived=True,
            loading_details=LoadingDetails(loader_name=loader_name.strip(), date=date),
        )
        self._save_lot(entity, updated)
        logger.info("lot_loaded", entity_id=entity_id, lot_id=lot_id, loader=loader_name)
        self._resync(entity_id)
        return updated

    def mark_70_paid(
        self,
        entity_id: str,
        lot_id: str,
        payer_name: str,
        date: datetime,
        receipt_image: Optional[Image] = None,
    ) -> Lot:
        """Record payment of a lot's 70% remainder. Commission is unaffected.

        Raises:
            NotFoundError: If the entity or lot does not exist
            ValidationError: If payer_name is blank
        """
        if not payer_name or not payer_name.strip():
            raise ValidationError("Payer name cannot be empty")
        entity = self.require_entity(entity_id)
        lot = self._require_lot(entity, lot_id)
        updated = replace(
            lot,
            is_70_paid=True,
            payment_details=PaymentDetails(
                payer_name=payer_name.strip(), date=date, receipt_image=receipt_image
            ),
        )
        self._save_lot(entity, updated)
        logger.info("lot_70_paid", entity_id=entity_id, lot_id=lot_id)
        return updated

    def _require_lot(self, entity: EntityEntity, lot_id: str) -> Lot:
        for lot in entity.lots:
            if lot.id == lot_id:
                return lot
        raise NotFoundError(lot_not_found(lot_id, entity.id))

    def _save_lot(self, entity: EntityEntity, updated: Lot) -> None:
        lots = tuple(updated if lot.id == updated.id else lot for lot in entity.lots)
        self.db.update_entity(entity.id, lots=lots)

    def _resync(self, entity_id: str) -> SyncOutcome:
        try:
            return self.commission_service.sync_entity(entity_id)
        except DomainError as exc:
            logger.error("commission_sync_failed", entity_id=entity_id, error=str(exc))
            raise ReconciliationError(entity_id, exc) from exc
