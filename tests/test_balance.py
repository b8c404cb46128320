"""Tests for the balance engine."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from lotledger.domain.balance import (
    balance_label,
    compute_client_balance,
    compute_entity_aggregates,
    compute_financial_summary,
    compute_upcoming_deadline,
    deadline_status,
    describe_balance,
)
from lotledger.domain.entities import (
    BalanceLabel,
    Client,
    DeadlineStatus,
    Entity,
    Transaction,
)

NOW = datetime(2024, 3, 10, 12, 0)


def _txn(amount, txn_id="t"):
    return Transaction(id=txn_id, amount=Decimal(str(amount)), notes="", date=NOW)


class TestClientBalance:
    """Balance is the plain sum of amounts."""

    def test_sum_of_amounts(self):
        transactions = [_txn(500), _txn(-200), _txn(150)]
        assert compute_client_balance(transactions) == Decimal("450")

    def test_empty_list_is_zero(self):
        assert compute_client_balance([]) == Decimal("0")

    def test_order_does_not_matter(self):
        forward = [_txn("10.25"), _txn(-3), _txn("0.75")]
        assert compute_client_balance(forward) == compute_client_balance(reversed(forward))

    @pytest.mark.parametrize(
        "balance,label",
        [
            (Decimal("450"), BalanceLabel.DEBIT),
            (Decimal("0"), BalanceLabel.DEBIT),
            (Decimal("-0.01"), BalanceLabel.CREDIT),
        ],
    )
    def test_balance_label(self, balance, label):
        assert balance_label(balance) == label

    def test_describe_balance_uses_magnitude(self):
        view = describe_balance([_txn(100), _txn(-350)])
        assert view.amount == Decimal("-250")
        assert view.label == BalanceLabel.CREDIT
        assert view.magnitude == Decimal("250")


class TestEntityAggregates:
    def test_active_only_excludes_archived(self, make_lot):
        lots = [
            make_lot(1000, 300),
            make_lot(2000, 600, paid=True),
            make_lot(10000, 3000, archived=True),
        ]
        totals = compute_entity_aggregates(lots, active_only=True)
        assert totals.total_value == Decimal("3000")
        assert totals.total30 == Decimal("900")
        assert totals.total70 == Decimal("2100")
        # Only the unpaid active lot remains to be supplied
        assert totals.remaining70 == Decimal("700")

    def test_all_lots(self, make_lot):
        lots = [
            make_lot(1000, 300),
            make_lot(10000, 3000, archived=True),
        ]
        totals = compute_entity_aggregates(lots, active_only=False)
        assert totals.total_value == Decimal("11000")
        assert totals.total30 == Decimal("3300")
        assert totals.total70 == Decimal("7700")
        assert totals.remaining70 == Decimal("7700")

    def test_no_lots(self):
        totals = compute_entity_aggregates([], active_only=True)
        assert totals.total_value == 0
        assert totals.remaining70 == 0


class TestFinancialSummary:
    def test_debits_and_credits_split_by_client(self):
        clients = [
            Client(id="a", name="A", transactions=(_txn(500), _txn(-100))),
            Client(id="b", name="B", transactions=(_txn(-250),)),
            Client(id="c", name="C", transactions=()),
        ]
        summary = compute_financial_summary(clients)
        assert summary.total_debit == Decimal("400")
        assert summary.total_credit == Decimal("250")
        assert summary.net_balance == Decimal("150")


class TestUpcomingDeadline:
    def _entity(self, entity_id, auction_date, lots):
        return Entity(id=entity_id, name=entity_id, auction_date=auction_date, lots=tuple(lots))

    def test_picks_earliest_future_deadline(self, make_lot):
        later_lot = make_lot(1000)
        sooner_lot = make_lot(2000)
        entities = [
            self._entity("later", NOW - timedelta(days=2), [later_lot]),
            self._entity("sooner", NOW - timedelta(days=12), [sooner_lot]),
        ]
        result = compute_upcoming_deadline(entities, now=NOW)
        assert result is not None
        assert result.lot == sooner_lot
        assert result.entity.id == "sooner"
        assert result.deadline == NOW - timedelta(days=12) + timedelta(days=15)
        assert result.status == DeadlineStatus.PENDING

    def test_paid_lots_are_skipped(self, make_lot):
        entities = [
            self._entity("paid", NOW - timedelta(days=12), [make_lot(1000, paid=True)]),
            self._entity("open", NOW, [make_lot(500)]),
        ]
        result = compute_upcoming_deadline(entities, now=NOW)
        assert result.entity.id == "open"
        assert result.status == DeadlineStatus.UPCOMING

    def test_past_deadlines_are_excluded_by_default(self, make_lot):
        entities = [self._entity("old", NOW - timedelta(days=30), [make_lot(1000)])]
        assert compute_upcoming_deadline(entities, now=NOW) is None

    def test_include_overdue_surfaces_overdue_lot(self, make_lot):
        old_lot = make_lot(1000)
        entities = [
            self._entity("old", NOW - timedelta(days=30), [old_lot]),
            self._entity("new", NOW, [make_lot(500)]),
        ]
        result = compute_upcoming_deadline(entities, now=NOW, include_overdue=True)
        assert result.lot == old_lot
        assert result.status == DeadlineStatus.OVERDUE

    def test_none_when_nothing_qualifies(self):
        assert compute_upcoming_deadline([], now=NOW) is None

    @pytest.mark.parametrize(
        "offset,status",
        [
            (timedelta(days=-1), DeadlineStatus.OVERDUE),
            (timedelta(days=0, hours=1), DeadlineStatus.PENDING),
            (timedelta(days=5), DeadlineStatus.PENDING),
            (timedelta(days=6), DeadlineStatus.UPCOMING),
        ],
    )
    def test_deadline_status(self, offset, status):
        assert deadline_status(NOW + offset, NOW) == status
