"""Tests for the entity service and the lot lifecycle."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import text

from lotledger.domain.entities import Namespace, SyncAction
from lotledger.domain.entity import is_entity_archived, sorted_lots, split_values
from lotledger.domain.errors import (
    NotFoundError,
    PersistenceError,
    ReconciliationError,
    ValidationError,
)

AUCTION = datetime(2024, 3, 1)


def commission_amounts(db, entity_id):
    """{client name: commission amount} for the entity across advances clients."""
    found = {}
    for client in db.list_clients(Namespace.ADVANCES):
        for txn in client.transactions:
            if txn.entity_id == entity_id:
                found[client.name] = txn.amount
    return found


@pytest.fixture
def auction(entity_service):
    return entity_service.create_entity("Auction-7", AUCTION, buyer_name="Ahmed")


class TestSplitValues:
    def test_value70_is_derived(self):
        assert split_values(Decimal("10000"), Decimal("3000")) == (
            Decimal("3000"),
            Decimal("7000"),
        )

    def test_matching_value70_is_accepted(self):
        assert split_values(Decimal("100"), Decimal("30"), Decimal("70"))[1] == Decimal("70")

    @pytest.mark.parametrize(
        "total,v30,v70",
        [
            ("100", "30", "60"),
            ("100", "130", None),
            ("-1", "0", None),
            ("100", "-5", None),
            ("100.00001", "30", None),
            ("100", "30.12345", None),
        ],
    )
    def test_inconsistent_split_rejected(self, total, v30, v70):
        with pytest.raises(ValidationError):
            split_values(
                Decimal(total), Decimal(v30), Decimal(v70) if v70 is not None else None
            )


class TestEntityCrud:
    def test_create_entity(self, entity_service, auction):
        entity = entity_service.get_entity(auction)
        assert entity.name == "Auction-7"
        assert entity.buyer_name == "Ahmed"
        assert entity.auction_date == AUCTION
        assert entity.lots == ()

    def test_blank_buyer_is_stored_as_none(self, entity_service):
        entity_id = entity_service.create_entity("Auction", AUCTION, buyer_name="  ")
        assert entity_service.get_entity(entity_id).buyer_name is None

    def test_blank_name_rejected(self, entity_service):
        with pytest.raises(ValidationError):
            entity_service.create_entity(" ", AUCTION)

    def test_update_unknown_entity(self, entity_service):
        with pytest.raises(NotFoundError):
            entity_service.update_entity("missing", name="x")

    def test_delete_keeps_commission(self, temp_db, entity_service, auction):
        entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))
        entity_service.delete_entity(auction)

        assert entity_service.get_entity(auction) is None
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-50")}

    def test_list_entities_by_archive_state(self, entity_service, auction):
        entity_service.create_entity("Empty", datetime(2024, 2, 1))
        done = entity_service.create_entity("Done", datetime(2024, 1, 1))
        lot = entity_service.add_lot(done, "1", "Brass", Decimal("100"), Decimal("30"))
        entity_service.toggle_lot_archive(done, lot.id)
        entity_service.add_lot(auction, "1", "Copper", Decimal("100"), Decimal("30"))

        active = [e.name for e in entity_service.list_entities()]
        archived = [e.name for e in entity_service.list_entities(archived=True)]

        # An entity without lots is never archived
        assert active == ["Auction-7", "Empty"]
        assert archived == ["Done"]
        assert len(entity_service.list_entities(archived=None)) == 3

    def test_is_entity_archived_needs_lots(self, entity_service, auction):
        assert is_entity_archived(entity_service.get_entity(auction)) is False


class TestLots:
    def test_add_lot_creates_commission(self, temp_db, entity_service, auction):
        lot = entity_service.add_lot(
            auction, "1", "Copper", Decimal("10000"), Decimal("3000"), quantity="2 t"
        )
        assert lot.value70 == Decimal("7000")
        stored = entity_service.get_entity(auction).lots
        assert [(stored_lot.id, stored_lot.quantity) for stored_lot in stored] == [(lot.id, "2 t")]
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-50")}

    def test_commission_on_cents_is_stored_exactly(self, entity_service, auction, reopen):
        entity_service.add_lot(auction, "1", "Copper", Decimal("100.01"), Decimal("30"))
        entity_service.add_lot(auction, "2", "Brass", Decimal("1234.5678"), Decimal("0.0001"))
        # 0.005 x 1334.5778
        assert commission_amounts(reopen(), auction) == {"Ahmed": Decimal("-6.672889")}

    def test_single_cent_lot_commission(self, entity_service, auction, reopen):
        entity_service.add_lot(auction, "1", "Copper", Decimal("100.01"), Decimal("30"))
        assert commission_amounts(reopen(), auction) == {"Ahmed": Decimal("-0.50005")}
        stored = reopen().get_entity(auction).lots[0]
        assert (stored.total_value, stored.value70) == (Decimal("100.01"), Decimal("70.01"))

    def test_add_lot_rejects_bad_split(self, entity_service, auction):
        with pytest.raises(ValidationError):
            entity_service.add_lot(
                auction, "1", "Copper", Decimal("100"), Decimal("30"), value70=Decimal("80")
            )
        assert entity_service.get_entity(auction).lots == ()

    def test_update_lot_rederives_value70(self, temp_db, entity_service, auction):
        lot = entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))

        updated = entity_service.update_lot(auction, lot.id, total_value=Decimal("20000"))

        assert updated.value30 == Decimal("3000")
        assert updated.value70 == Decimal("17000")
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-100")}

    def test_delete_lot_resyncs(self, temp_db, entity_service, auction):
        first = entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))
        entity_service.add_lot(auction, "2", "Brass", Decimal("2000"), Decimal("600"))

        entity_service.delete_lot(auction, first.id)

        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-10")}

    def test_unknown_lot(self, entity_service, auction):
        with pytest.raises(NotFoundError):
            entity_service.delete_lot(auction, "missing")

    def test_toggle_archive_twice_restores_commission(self, temp_db, entity_service, auction):
        lot = entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))

        assert entity_service.toggle_lot_archive(auction, lot.id).is_archived is True
        assert commission_amounts(temp_db, auction) == {}

        assert entity_service.toggle_lot_archive(auction, lot.id).is_archived is False
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-50")}

    def test_mark_loaded_archives_and_resyncs(self, temp_db, entity_service, auction):
        loaded = entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))
        entity_service.add_lot(auction, "2", "Brass", Decimal("2000"), Decimal("600"))

        result = entity_service.mark_lot_loaded(auction, loaded.id, "Hassan", datetime(2024, 3, 5))

        assert result.is_archived is True
        assert result.loading_details.loader_name == "Hassan"
        stored = entity_service.get_entity(auction).lots[0]
        assert stored.loading_details.date == datetime(2024, 3, 5)
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-10")}

    def test_mark_loaded_needs_loader(self, entity_service, auction):
        lot = entity_service.add_lot(auction, "1", "Copper", Decimal("100"), Decimal("30"))
        with pytest.raises(ValidationError):
            entity_service.mark_lot_loaded(auction, lot.id, " ", datetime(2024, 3, 5))

    def test_mark_70_paid_leaves_commission(self, temp_db, entity_service, auction):
        lot = entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))

        result = entity_service.mark_70_paid(auction, lot.id, "Ahmed", datetime(2024, 3, 8))

        assert result.is_70_paid is True
        stored = entity_service.get_entity(auction).lots[0]
        assert stored.payment_details.payer_name == "Ahmed"
        assert stored.payment_details.date == datetime(2024, 3, 8)
        assert stored.is_archived is False
        assert commission_amounts(temp_db, auction) == {"Ahmed": Decimal("-50")}

    def test_sorted_lots_natural_order(self, entity_service, auction):
        for number in ("10", "2", "1"):
            entity_service.add_lot(auction, number, f"Lot {number}", Decimal("1"), Decimal("0"))
        entity = entity_service.get_entity(auction)
        assert [lot.lot_number for lot in sorted_lots(entity)] == ["1", "2", "10"]
        # Storage order is insertion order
        assert [lot.lot_number for lot in entity.lots] == ["10", "2", "1"]


class TestReconciliationFailure:
    def test_mutation_is_kept_and_error_raised(
        self, entity_service, commission_service, auction, monkeypatch
    ):
        def fail(entity_id):
            raise PersistenceError("disk full")

        monkeypatch.setattr(commission_service, "sync_entity", fail)

        with pytest.raises(ReconciliationError) as exc_info:
            entity_service.add_lot(auction, "1", "Copper", Decimal("100"), Decimal("30"))

        assert exc_info.value.entity_id == auction
        assert "disk full" in str(exc_info.value)
        assert len(entity_service.get_entity(auction).lots) == 1

    def test_storage_read_failure_during_sync(self, temp_db, entity_service, auction):
        session = temp_db._get_session()
        session.execute(text("DROP TABLE clients"))
        session.commit()

        with pytest.raises(ReconciliationError) as exc_info:
            entity_service.add_lot(auction, "1", "Copper", Decimal("100"), Decimal("30"))

        assert isinstance(exc_info.value.cause, PersistenceError)
        assert [lot.name for lot in entity_service.get_entity(auction).lots] == ["Copper"]

    def test_update_entity_reports_outcome(self, entity_service, auction):
        entity_service.add_lot(auction, "1", "Copper", Decimal("10000"), Decimal("3000"))
        outcome = entity_service.update_entity(auction, auction_date=datetime(2024, 3, 2))
        assert outcome.action == SyncAction.UPDATED
        assert outcome.commission == Decimal("50")


class TestAuctionScenario:
    def test_buyer_change_then_archive(self, temp_db, client_service, entity_service, auction):
        lot = entity_service.add_lot(
            auction, "1", "Copper", Decimal("10000"), Decimal("3000"), value70=Decimal("7000")
        )

        ahmed = client_service.find_by_name(Namespace.ADVANCES, "Ahmed")
        assert ahmed is not None
        assert ahmed.is_buyer is True
        assert [(t.amount, t.entity_id) for t in ahmed.transactions] == [
            (Decimal("-50"), auction)
        ]

        outcome = entity_service.update_entity(auction, buyer_name="Sara")
        assert outcome.action == SyncAction.CREATED_CLIENT
        ahmed = client_service.find_by_name(Namespace.ADVANCES, "Ahmed")
        assert [t for t in ahmed.transactions if t.entity_id == auction] == []
        assert commission_amounts(temp_db, auction) == {"Sara": Decimal("-50")}

        entity_service.toggle_lot_archive(auction, lot.id)
        assert commission_amounts(temp_db, auction) == {}
        sara = client_service.find_by_name(Namespace.ADVANCES, "Sara")
        assert sara.transactions == ()
