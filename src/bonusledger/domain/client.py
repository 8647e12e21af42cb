"""Client domain service."""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from bonusledger.database.base import Database
from bonusledger.domain.bonus_policy import compute_available_balance, replay_totals
from bonusledger.domain.entities import Client, ClientRole, LedgerTotals, PurchaseSummary
from bonusledger.domain.errors import (
    NotFoundError,
    StorageError,
    ValidationError,
    client_not_found,
)
from bonusledger.domain.vin import normalize_vin, validate_vin
from bonusledger.utils.date_parser import utc_now
from bonusledger.utils.money import ZERO

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^8\d{10}$")


def normalize_phone(phone: str) -> str:
    """Validate a phone number of the form 8XXXXXXXXXX and return it trimmed."""
    phone = phone.strip()
    if not phone:
        raise ValidationError("Phone number is required")
    if not PHONE_PATTERN.match(phone):
        raise ValidationError("Phone number must be 11 digits starting with 8 (8XXXXXXXXXX)")
    return phone


def parse_role(role: str | ClientRole) -> ClientRole:
    """Convert a role name to ClientRole."""
    try:
        return ClientRole(role)
    except ValueError:
        allowed = ", ".join(r.value for r in ClientRole)
        raise ValidationError(f"Unknown role '{role}'. Allowed roles: {allowed}")


def _normalize_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Client name is required")
    return name


class ClientService:
    """Service for managing clients and reading their bonus balances."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        """Initialize client service.

        Args:
            db: Database instance
            clock: Source of the current time for available-balance reads
        """
        self.db = db
        self.clock = clock

    def create_client(
        self,
        name: str,
        phone: str,
        role: str | ClientRole = ClientRole.CLIENT,
        vin: Optional[str] = None,
    ) -> Client:
        """Create a new client with zero bonus balance and statistics.

        Args:
            name: Client name
            phone: Phone number, 8 followed by 10 digits
            role: "client" or "master"
            vin: Optional first vehicle identification number

        Returns:
            Created client

        Raises:
            ValidationError: If name, phone, role or VIN is malformed
            ConflictError: If a client with this phone already exists
        """
        name = _normalize_name(name)
        phone = normalize_phone(phone)
        client_role = parse_role(role)

        normalized_vin = None
        if vin is not None and vin.strip():
            normalized_vin = normalize_vin(vin)
            validate_vin(normalized_vin)

        client_id = self.db.create_client(
            name=name, phone=phone, role=client_role.value, vin=normalized_vin
        )
        logger.info("Created client %s (%s)", client_id, client_role.value)
        return self.db.get_client(client_id)

    def get_client(self, client_id: str) -> Optional[Client]:
        """Get client by ID.

        Returns:
            Client entity or None if not found
        """
        return self.db.get_client(client_id)

    def get_client_by_phone(self, phone: str) -> Optional[Client]:
        """Get client by phone number."""
        return self.db.get_client_by_phone(phone.strip())

    def list_clients(self) -> list[Client]:
        """List all clients, newest first, with cached totals and VINs."""
        return self.db.list_clients()

    def update_client(
        self,
        client_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        role: str | ClientRole | None = None,
    ) -> Client:
        """Update client profile fields.

        Only provided fields change. Cached ledger totals are never editable.

        Raises:
            NotFoundError: If client not found
            ValidationError: If a provided field is malformed
            ConflictError: If the new phone belongs to another client
        """
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))

        if name is None and phone is None and role is None:
            return client

        self.db.update_client(
            client_id,
            name=_normalize_name(name) if name is not None else None,
            phone=normalize_phone(phone) if phone is not None else None,
            role=parse_role(role).value if role is not None else None,
        )
        logger.info("Updated client %s", client_id)
        return self.db.get_client(client_id)

    def delete_client(self, client_id: str) -> None:
        """Delete a client together with its transactions and VINs.

        Raises:
            NotFoundError: If client not found
        """
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))

        self.db.delete_client(client_id)
        logger.info("Deleted client %s and its transaction log", client_id)

    def available_bonus_balance(self, client_id: str, as_of: Optional[datetime] = None) -> Decimal:
        """Return the bonus a client may redeem right now.

        Bonus earned within the hold window is excluded; see
        ``compute_available_balance``.

        Raises:
            NotFoundError: If client not found
        """
        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        transactions = self.db.list_transactions(client_ids=[client_id])
        return compute_available_balance(transactions, as_of or self.clock())

    def available_bonus_balances(
        self,
        client_ids: Iterable[str],
        as_of: Optional[datetime] = None,
        best_effort: bool = False,
    ) -> dict[str, Decimal]:
        """Return available balances for several clients at once.

        Every requested ID is present in the result; unknown clients and
        clients without matured bonus map to zero.

        Args:
            client_ids: Client IDs to look up
            as_of: Point in time (defaults to now)
            best_effort: If True, a storage failure yields zeros instead of raising

        Returns:
            Mapping of client ID to available balance
        """
        ids = list(dict.fromkeys(client_ids))
        if not ids:
            return {}

        as_of = as_of or self.clock()
        try:
            transactions = self.db.list_transactions(client_ids=ids)
        except StorageError as exc:
            if not best_effort:
                raise
            logger.warning("Available balances unavailable, defaulting to zero: %s", exc)
            return {client_id: ZERO for client_id in ids}

        by_client: dict[str, list] = {client_id: [] for client_id in ids}
        for txn in transactions:
            by_client[txn.client_id].append(txn)
        return {
            client_id: compute_available_balance(txns, as_of)
            for client_id, txns in by_client.items()
        }

    def purchases_for_client(self, client_id: str) -> list[PurchaseSummary]:
        """List a client's purchases (refunds excluded), newest first.

        Raises:
            NotFoundError: If client not found
        """
        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        transactions = self.db.list_transactions(
            client_ids=[client_id], is_refund=False, newest_first=True
        )
        return [
            PurchaseSummary(id=t.id, created_at=t.created_at, purchase_amount=t.purchase_amount)
            for t in transactions
        ]

    def reconcile(self, client_id: str) -> LedgerTotals:
        """Recompute a client's totals by replaying its transaction log.

        Raises:
            NotFoundError: If client not found
        """
        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        return replay_totals(self.db.list_transactions(client_ids=[client_id]))

    def is_consistent(self, client_id: str) -> bool:
        """Check that the cached totals match a replay of the transaction log."""
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))

        totals = self.reconcile(client_id)
        consistent = (
            client.bonus_balance == totals.bonus_balance
            and client.total_purchases_sum == totals.total_purchases_sum
            and client.total_orders_count == totals.total_orders_count
        )
        if not consistent:
            logger.warning(
                "Cached totals of client %s diverge from its log: cached %s/%s/%d, replayed %s/%s/%d",
                client_id,
                client.bonus_balance,
                client.total_purchases_sum,
                client.total_orders_count,
                totals.bonus_balance,
                totals.total_purchases_sum,
                totals.total_orders_count,
            )
        return consistent
