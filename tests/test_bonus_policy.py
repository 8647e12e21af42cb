"""Tests for bonus accrual and redemption rules."""

import pytest
from datetime import datetime, timedelta, UTC
from decimal import Decimal

from bonusledger.domain.bonus_policy import (
    EARN_RATE,
    HOLD_DURATION,
    MAX_REDEEM_FRACTION,
    compute_available_balance,
    compute_earn,
    compute_max_redeemable,
    replay_totals,
)
from bonusledger.domain.entities import LedgerTotals, Transaction

NOW = datetime(2024, 5, 10, 22, 0, tzinfo=UTC)


def make_txn(txn_id, created_at, amount, used="0", earned="0", refund_for=None):
    """Build a transaction entity with negation applied for refunds."""
    amount, used, earned = Decimal(amount), Decimal(used), Decimal(earned)
    return Transaction(
        id=txn_id,
        client_id="c1",
        purchase_amount=amount,
        bonus_used=used,
        bonus_earned=earned,
        final_paid=amount - used,
        created_at=created_at,
        is_refund=refund_for is not None,
        refund_for=refund_for,
    )


def test_policy_constants():
    """Test the fixed policy constants."""
    assert EARN_RATE == Decimal("0.03")
    assert MAX_REDEEM_FRACTION == Decimal("0.20")
    assert HOLD_DURATION == timedelta(hours=10)


class TestComputeEarn:
    """Tests for bonus accrual."""

    def test_earn_on_full_payment(self):
        assert compute_earn(Decimal("100")) == Decimal("3.00")

    def test_earn_on_amount_after_redemption(self):
        assert compute_earn(Decimal("80")) == Decimal("2.40")

    def test_earn_is_rounded(self):
        # 33.33 * 0.03 = 0.9999
        assert compute_earn(Decimal("33.33")) == Decimal("1.00")
        # 0.50 * 0.03 = 0.015
        assert compute_earn(Decimal("0.50")) == Decimal("0.02")

    def test_earn_on_zero(self):
        assert compute_earn(0) == Decimal("0.00")


class TestComputeMaxRedeemable:
    """Tests for the redemption limit."""

    def test_fraction_cap_binds(self):
        assert compute_max_redeemable(Decimal("1000"), Decimal("500")) == Decimal("200.00")

    def test_balance_binds(self):
        assert compute_max_redeemable(Decimal("1000"), Decimal("150")) == Decimal("150.00")

    def test_cap_rounded(self):
        # 20% of 33.33 = 6.666
        assert compute_max_redeemable(Decimal("33.33"), Decimal("100")) == Decimal("6.67")

    def test_never_negative(self):
        assert compute_max_redeemable(Decimal("100"), Decimal("-5")) == Decimal("0.00")

    def test_zero_balance(self):
        assert compute_max_redeemable(Decimal("100"), Decimal("0")) == Decimal("0.00")


class TestComputeAvailableBalance:
    """Tests for the hold-window balance."""

    def test_recent_bonus_is_held(self):
        transactions = [
            make_txn("t1", NOW - timedelta(hours=9, minutes=59), "100", earned="3"),
        ]
        assert compute_available_balance(transactions, NOW) == Decimal("0.00")

    def test_bonus_matures_exactly_at_hold_boundary(self):
        transactions = [make_txn("t1", NOW - HOLD_DURATION, "100", earned="3")]
        assert compute_available_balance(transactions, NOW) == Decimal("3.00")

    def test_mixed_old_and_recent(self):
        transactions = [
            make_txn("t1", NOW - timedelta(days=2), "1000", earned="30"),
            make_txn("t2", NOW - timedelta(hours=11), "100", used="20", earned="2.4"),
            make_txn("t3", NOW - timedelta(hours=1), "500", earned="15"),
        ]
        assert compute_available_balance(transactions, NOW) == Decimal("12.40")

    def test_recent_redemption_is_not_counted_either(self):
        transactions = [
            make_txn("t1", NOW - timedelta(days=2), "1000", earned="30"),
            make_txn("t2", NOW - timedelta(hours=1), "100", used="20", earned="2.4"),
        ]
        assert compute_available_balance(transactions, NOW) == Decimal("30.00")

    def test_clamped_at_zero(self):
        transactions = [make_txn("t1", NOW - timedelta(days=1), "100", used="20")]
        assert compute_available_balance(transactions, NOW) == Decimal("0.00")

    def test_naive_timestamps_treated_as_utc(self):
        naive = (NOW - timedelta(hours=10)).replace(tzinfo=None)
        transactions = [make_txn("t1", naive, "100", earned="3")]
        assert compute_available_balance(transactions, NOW) == Decimal("3.00")

    def test_empty_log(self):
        assert compute_available_balance([], NOW) == Decimal("0.00")


class TestReplayTotals:
    """Tests for recomputing client totals from the log."""

    def test_empty_log(self):
        assert replay_totals([]) == LedgerTotals(Decimal("0.00"), Decimal("0.00"), 0)

    def test_purchases_and_refund(self):
        purchase = make_txn("t1", NOW, "100", used="20", earned="2.4")
        refund = make_txn("t2", NOW, "-100", used="-20", earned="-2.4", refund_for="t1")
        other = make_txn("t3", NOW, "1000", earned="30")

        totals = replay_totals([purchase, other, refund])

        assert totals.bonus_balance == Decimal("30.00")
        assert totals.total_purchases_sum == Decimal("1000.00")
        assert totals.total_orders_count == 1

    def test_refund_fields_satisfy_final_paid_identity(self):
        refund = make_txn("t2", NOW, "-100", used="-20", earned="-2.4", refund_for="t1")
        assert refund.final_paid == refund.purchase_amount - refund.bonus_used
        assert refund.final_paid == Decimal("-80")
