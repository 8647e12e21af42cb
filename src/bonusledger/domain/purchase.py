"""Purchase domain service."""

import logging
from datetime import datetime
from typing import Callable

from bonusledger.database.base import Database
from bonusledger.domain.bonus_policy import compute_earn
from bonusledger.domain.entities import Transaction
from bonusledger.domain.errors import NotFoundError, ValidationError, client_not_found
from bonusledger.utils.date_parser import utc_now
from bonusledger.utils.money import MoneyLike, ZERO, round_money

logger = logging.getLogger(__name__)


class PurchaseService:
    """Service for recording purchases in the bonus ledger."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        """Initialize purchase service.

        Args:
            db: Database instance
            clock: Source of transaction timestamps
        """
        self.db = db
        self.clock = clock

    def record_purchase(
        self,
        client_id: str,
        purchase_amount: MoneyLike,
        bonus_used: MoneyLike = ZERO,
        accrue_bonus: bool = True,
    ) -> Transaction:
        """Record a purchase and update the client's cached totals.

        The caller is expected to have bounded ``bonus_used`` by
        ``compute_max_redeemable`` against the client's available balance;
        only the purchase amount is re-checked here.

        Args:
            client_id: Purchasing client ID
            purchase_amount: Gross purchase amount, must be positive
            bonus_used: Bonus redeemed against this purchase
            accrue_bonus: If False, no bonus is earned ("redeem only" purchase)

        Returns:
            The created purchase transaction

        Raises:
            ValidationError: If amounts are out of range
            NotFoundError: If client doesn't exist
            StorageError: If the ledger write fails; nothing is persisted
        """
        try:
            purchase_amount = round_money(purchase_amount)
            bonus_used = round_money(bonus_used)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid amount: {e}")

        if purchase_amount <= ZERO:
            raise ValidationError("Purchase amount must be positive")
        if bonus_used < ZERO:
            raise ValidationError("Bonus used cannot be negative")
        if bonus_used > purchase_amount:
            raise ValidationError(
                f"Bonus used ({bonus_used}) cannot exceed the purchase amount ({purchase_amount})"
            )

        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        final_paid = round_money(purchase_amount - bonus_used)
        bonus_earned = compute_earn(final_paid) if accrue_bonus else ZERO

        transaction = self.db.append_transaction(
            client_id=client_id,
            purchase_amount=purchase_amount,
            bonus_used=bonus_used,
            bonus_earned=bonus_earned,
            final_paid=final_paid,
            created_at=self.clock(),
        )
        logger.info(
            "Recorded purchase %s for client %s: amount %s, bonus used %s, bonus earned %s",
            transaction.id,
            client_id,
            purchase_amount,
            bonus_used,
            bonus_earned,
        )
        return transaction
