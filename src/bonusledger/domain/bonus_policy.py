"""Bonus accrual and redemption rules.

Pure functions over amounts and transaction sequences. Nothing here touches
storage: the available balance and the replayed totals are always derived
from the transaction log on demand.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from bonusledger.domain.entities import LedgerTotals, Transaction
from bonusledger.utils.date_parser import as_utc
from bonusledger.utils.money import MoneyLike, ZERO, round_money, to_decimal

EARN_RATE = Decimal("0.03")
MAX_REDEEM_FRACTION = Decimal("0.20")
HOLD_DURATION = timedelta(hours=10)


def compute_earn(final_paid: MoneyLike) -> Decimal:
    """Return the bonus credited for a purchase.

    Bonus is earned on the amount actually paid after redemption, not on the
    gross purchase amount.
    """
    return round_money(to_decimal(final_paid) * EARN_RATE)


def compute_max_redeemable(purchase_amount: MoneyLike, available_balance: MoneyLike) -> Decimal:
    """Return the largest bonus amount that may be applied to a purchase.

    The 20% cap, the available balance and the purchase amount all bound the
    redemption; the smallest of them wins. Never negative.

    Args:
        purchase_amount: Gross purchase amount
        available_balance: Client's redeemable balance (see compute_available_balance)

    Returns:
        Maximum redeemable bonus
    """
    purchase_amount = round_money(purchase_amount)
    cap = round_money(purchase_amount * MAX_REDEEM_FRACTION)
    limit = min(round_money(available_balance), cap, purchase_amount)
    return max(limit, ZERO)


def compute_available_balance(
    transactions: Iterable[Transaction],
    as_of: datetime,
    hold: timedelta = HOLD_DURATION,
) -> Decimal:
    """Return the bonus balance that has matured past the hold window.

    Only transactions created at or before ``as_of - hold`` count. The
    result is clamped at zero.
    """
    threshold = as_utc(as_of) - hold
    total = ZERO
    for txn in transactions:
        if as_utc(txn.created_at) <= threshold:
            total = round_money(total + txn.bonus_earned - txn.bonus_used)
    return max(total, ZERO)


def replay_totals(transactions: Iterable[Transaction]) -> LedgerTotals:
    """Recompute a client's cached totals from an empty state.

    Refund rows carry negated amounts, so plain summation undoes the
    purchase; only the order count needs the refund tag.
    """
    bonus_balance = ZERO
    purchases_sum = ZERO
    orders_count = 0
    for txn in transactions:
        bonus_balance = round_money(bonus_balance + txn.bonus_earned - txn.bonus_used)
        purchases_sum = round_money(purchases_sum + txn.purchase_amount)
        orders_count += -1 if txn.is_refund else 1
    return LedgerTotals(
        bonus_balance=bonus_balance,
        total_purchases_sum=purchases_sum,
        total_orders_count=orders_count,
    )
