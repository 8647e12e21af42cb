"""Tests for refunding purchases."""

import pytest
from decimal import Decimal
from sqlalchemy.exc import OperationalError

from bonusledger.domain.errors import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    StorageError,
)


@pytest.fixture
def funded_client(purchase_service, clock, sample_client):
    """Client with 30.00 bonus from an old purchase of 1000."""
    purchase_service.record_purchase(sample_client.id, Decimal("1000"))
    clock.advance(hours=12)
    return sample_client


class TestRefund:
    """Tests for RefundService.refund."""

    def test_refund_negates_purchase(self, purchase_service, refund_service, funded_client):
        """Test that every monetary field of the refund is the exact negation."""
        purchase = purchase_service.record_purchase(funded_client.id, Decimal("100"), Decimal("20"))

        refund = refund_service.refund(purchase.id)

        assert refund.is_refund is True
        assert refund.refund_for == purchase.id
        assert refund.client_id == purchase.client_id
        assert refund.purchase_amount == Decimal("-100.00")
        assert refund.bonus_used == Decimal("-20.00")
        assert refund.bonus_earned == Decimal("-2.40")
        assert refund.final_paid == Decimal("-80.00")
        assert refund.final_paid == refund.purchase_amount - refund.bonus_used
        assert refund.created_at >= purchase.created_at

    def test_refund_adjusts_client_totals(
        self, purchase_service, refund_service, client_service, funded_client
    ):
        """Test balance +17.60, sum -100 and one order less after the refund."""
        purchase = purchase_service.record_purchase(funded_client.id, Decimal("100"), Decimal("20"))
        before = client_service.get_client(funded_client.id)
        assert before.bonus_balance == Decimal("12.40")  # 30 - 20 + 2.40

        refund_service.refund(purchase.id)

        after = client_service.get_client(funded_client.id)
        assert after.bonus_balance - before.bonus_balance == Decimal("17.60")
        assert after.bonus_balance == Decimal("30.00")
        assert before.total_purchases_sum - after.total_purchases_sum == Decimal("100.00")
        assert after.total_purchases_sum == Decimal("1000.00")
        assert after.total_orders_count == before.total_orders_count - 1 == 1

    def test_original_purchase_is_unchanged(self, purchase_service, refund_service, temp_db, funded_client):
        """Test that refunding never edits or deletes the purchase."""
        purchase = purchase_service.record_purchase(funded_client.id, Decimal("100"), Decimal("20"))

        refund_service.refund(purchase.id)

        assert temp_db.get_transaction(purchase.id) == purchase
        assert len(temp_db.list_transactions(client_ids=[funded_client.id])) == 3

    def test_refund_twice_conflicts(self, purchase_service, refund_service, client_service, sample_client):
        """Test at most one refund per purchase."""
        purchase = purchase_service.record_purchase(sample_client.id, Decimal("100"))
        refund_service.refund(purchase.id)

        with pytest.raises(ConflictError):
            refund_service.refund(purchase.id)

        client = client_service.get_client(sample_client.id)
        assert client.total_orders_count == 0
        assert client.bonus_balance == Decimal("0.00")

    def test_refund_of_refund_rejected(self, purchase_service, refund_service, sample_client):
        """Test that a refund can never be refunded."""
        purchase = purchase_service.record_purchase(sample_client.id, Decimal("100"))
        refund = refund_service.refund(purchase.id)

        with pytest.raises(InvalidOperationError):
            refund_service.refund(refund.id)

    def test_refund_missing_transaction(self, refund_service):
        """Test refund of an unknown transaction."""
        with pytest.raises(NotFoundError):
            refund_service.refund("missing-transaction")

    def test_concurrent_refund_loses_on_unique_constraint(
        self, purchase_service, refund_service, temp_db, sample_client
    ):
        """Test that a second refund slipping past the check is still rejected by storage."""
        purchase = purchase_service.record_purchase(sample_client.id, Decimal("100"))
        first = refund_service.refund(purchase.id)

        with pytest.raises(ConflictError):
            temp_db.append_transaction(
                client_id=first.client_id,
                purchase_amount=first.purchase_amount,
                bonus_used=first.bonus_used,
                bonus_earned=first.bonus_earned,
                final_paid=first.final_paid,
                created_at=first.created_at,
                refund_for=purchase.id,
            )

        assert len(temp_db.list_transactions(is_refund=True)) == 1

    def test_failed_refund_rolls_back(
        self, purchase_service, refund_service, client_service, temp_db, sample_client, monkeypatch
    ):
        """Test that a storage failure during refund leaves the ledger as it was."""
        purchase = purchase_service.record_purchase(sample_client.id, Decimal("100"))

        def failing_update(*args, **kwargs):
            raise OperationalError("UPDATE clients", {}, Exception("connection lost"))

        monkeypatch.setattr(temp_db, "_apply_client_totals", failing_update)
        with pytest.raises(StorageError):
            refund_service.refund(purchase.id)
        monkeypatch.undo()

        assert temp_db.get_refund_for(purchase.id) is None
        client = client_service.get_client(sample_client.id)
        assert client.total_orders_count == 1
        assert client.bonus_balance == Decimal("3.00")

        # The purchase can still be refunded afterwards
        refund_service.refund(purchase.id)
        assert client_service.get_client(sample_client.id).total_orders_count == 0


class TestLedgerReplay:
    """Cached totals always equal a replay of the log."""

    def test_replay_matches_cache_after_mixed_sequence(
        self, purchase_service, refund_service, client_service, clock, sample_client
    ):
        amounts = [
            ("1000", "0", True),
            ("250.55", "0", True),
            ("99.99", "19.99", True),
            ("10", "2", False),
            ("333.33", "66.66", True),
        ]
        purchases = []
        for amount, used, accrue in amounts:
            purchases.append(
                purchase_service.record_purchase(sample_client.id, Decimal(amount), Decimal(used), accrue)
            )
            clock.advance(hours=3)

        refund_service.refund(purchases[1].id)
        refund_service.refund(purchases[3].id)
        purchase_service.record_purchase(sample_client.id, Decimal("12.34"), Decimal("1.23"))

        totals = client_service.reconcile(sample_client.id)
        client = client_service.get_client(sample_client.id)
        assert client.bonus_balance == totals.bonus_balance
        assert client.total_purchases_sum == totals.total_purchases_sum
        assert client.total_orders_count == totals.total_orders_count == 4
        assert client_service.is_consistent(sample_client.id)

    def test_replay_after_refunding_everything_is_zero(
        self, purchase_service, refund_service, client_service, sample_client
    ):
        for amount in ("15.10", "20.20", "30.30"):
            txn = purchase_service.record_purchase(sample_client.id, Decimal(amount))
            refund_service.refund(txn.id)

        client = client_service.get_client(sample_client.id)
        assert client.bonus_balance == Decimal("0")
        assert client.total_purchases_sum == Decimal("0")
        assert client.total_orders_count == 0
        assert client_service.is_consistent(sample_client.id)
