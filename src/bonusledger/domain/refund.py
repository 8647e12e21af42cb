"""Refund domain service.

A refund never edits or deletes the purchase it reverses. It appends a new
transaction whose monetary fields are the exact negation of the purchase, so
summing the log still yields the client's totals.
"""

import logging
from datetime import datetime
from typing import Callable

from bonusledger.database.base import Database
from bonusledger.domain.entities import Transaction
from bonusledger.domain.errors import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    already_refunded,
    refund_of_refund,
    transaction_not_found,
)
from bonusledger.utils.date_parser import utc_now
from bonusledger.utils.money import round_money

logger = logging.getLogger(__name__)


class RefundService:
    """Service for reversing purchases."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        """Initialize refund service.

        Args:
            db: Database instance
            clock: Source of transaction timestamps
        """
        self.db = db
        self.clock = clock

    def refund(self, transaction_id: str) -> Transaction:
        """Refund a purchase.

        Restores the bonus redeemed on the purchase, revokes the bonus it
        earned, and reduces the client's purchase sum and order count.

        Args:
            transaction_id: ID of the purchase to refund

        Returns:
            The created refund transaction

        Raises:
            NotFoundError: If the transaction doesn't exist
            InvalidOperationError: If the transaction is itself a refund
            ConflictError: If the purchase has already been refunded
            StorageError: If the ledger write fails; nothing is persisted
        """
        target = self.db.get_transaction(transaction_id)
        if target is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        if target.is_refund:
            logger.warning("Rejected refund of refund transaction %s", transaction_id)
            raise InvalidOperationError(refund_of_refund(transaction_id))

        if self.db.get_refund_for(transaction_id) is not None:
            logger.warning("Rejected repeated refund of transaction %s", transaction_id)
            raise ConflictError(already_refunded(transaction_id))

        bonus_change = round_money(target.bonus_used - target.bonus_earned)

        refund = self.db.append_transaction(
            client_id=target.client_id,
            purchase_amount=-target.purchase_amount,
            bonus_used=-target.bonus_used,
            bonus_earned=-target.bonus_earned,
            final_paid=-target.final_paid,
            created_at=self.clock(),
            refund_for=target.id,
        )
        logger.info(
            "Refunded transaction %s as %s for client %s: bonus balance change %s, purchases sum change %s",
            transaction_id,
            refund.id,
            target.client_id,
            bonus_change,
            -target.purchase_amount,
        )
        return refund
