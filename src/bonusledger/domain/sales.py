"""Sales rollup domain service."""

from dataclasses import asdict
from datetime import date

from bonusledger.database.base import Database
from bonusledger.domain.entities import DailySummary, SalesTransaction
from bonusledger.utils.date_parser import utc_day_bounds
from bonusledger.utils.money import round_money


class SalesService:
    """Read-only sales aggregation over the transaction log.

    Refunds are not sales events: they never contribute to the daily sums.
    """

    def __init__(self, db: Database):
        """Initialize sales service.

        Args:
            db: Database instance
        """
        self.db = db

    def daily_summaries(self) -> list[DailySummary]:
        """Summarize purchases per UTC calendar day, most recent day first.

        Returns:
            List of daily summaries (empty if there are no purchases)
        """
        summaries: dict[date, DailySummary] = {}
        for txn in self.db.list_transactions(is_refund=False):
            day = txn.created_at.date()
            summary = summaries.get(day)
            if summary is None:
                summary = DailySummary(date=day)
                summaries[day] = summary

            summary.orders_count += 1
            summary.total_purchase_amount = round_money(
                summary.total_purchase_amount + txn.purchase_amount
            )
            summary.total_final_paid = round_money(summary.total_final_paid + txn.final_paid)
            summary.total_bonus_used = round_money(summary.total_bonus_used + txn.bonus_used)
            summary.total_bonus_earned = round_money(summary.total_bonus_earned + txn.bonus_earned)

        return sorted(summaries.values(), key=lambda s: s.date, reverse=True)

    def transactions_for_date(self, day: date) -> list[SalesTransaction]:
        """List the purchases of one UTC calendar day in chronological order.

        Each purchase carries ``is_refunded``, derived from whether a refund
        references it.
        """
        start, end = utc_day_bounds(day)
        purchases = self.db.list_transactions(is_refund=False, start=start, end=end)
        if not purchases:
            return []

        refunded_ids = self.db.get_refunded_ids(t.id for t in purchases)
        return [
            SalesTransaction(**asdict(txn), is_refunded=txn.id in refunded_ids)
            for txn in purchases
        ]
