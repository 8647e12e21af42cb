"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from bonusledger.domain.entities import Client, ClientVin, Transaction


class Database(ABC):
    """Abstract database interface for bonusledger.

    Write methods are atomic: either every effect of the call is persisted or
    none is. Implementations translate backend failures into
    ``StorageError`` and uniqueness violations into ``ConflictError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Client operations
    @abstractmethod
    def create_client(
        self, name: str, phone: Optional[str], role: str, vin: Optional[str] = None
    ) -> str:
        """Create a client with zero totals, optionally with a first VIN. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: str) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def get_client_by_phone(self, phone: str) -> Optional[Client]:
        """Get client by phone number."""
        pass

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """List all clients, newest first, with their VINs."""
        pass

    @abstractmethod
    def update_client(
        self,
        client_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        role: Optional[str] = None,
    ) -> None:
        """Update client profile fields. Cached totals are never touched here."""
        pass

    @abstractmethod
    def delete_client(self, client_id: str) -> None:
        """Delete a client together with its transactions and VINs."""
        pass

    # VIN operations
    @abstractmethod
    def add_client_vin(self, client_id: str, vin: str, machine_label: Optional[str] = None) -> str:
        """Register a VIN for a client. Returns VIN record ID."""
        pass

    @abstractmethod
    def get_client_vin(self, vin_id: str) -> Optional[ClientVin]:
        """Get VIN record by ID."""
        pass

    @abstractmethod
    def list_client_vins(self, client_id: str) -> list[ClientVin]:
        """List a client's VINs, oldest first."""
        pass

    @abstractmethod
    def update_client_vin_label(self, vin_id: str, machine_label: Optional[str]) -> None:
        """Set or clear the machine label of a VIN record."""
        pass

    @abstractmethod
    def delete_client_vin(self, vin_id: str) -> None:
        """Delete a VIN record."""
        pass

    # Transaction log operations
    @abstractmethod
    def append_transaction(
        self,
        client_id: str,
        purchase_amount: Decimal,
        bonus_used: Decimal,
        bonus_earned: Decimal,
        final_paid: Decimal,
        created_at: datetime,
        refund_for: Optional[str] = None,
    ) -> Transaction:
        """Append a ledger entry and update the client's cached totals.

        The entry is a refund when ``refund_for`` is given. The insert and the
        totals update form a single atomic unit; the totals change by
        ``bonus_earned - bonus_used``, ``purchase_amount`` and +1 (or -1 for
        a refund) orders.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def get_refund_for(self, transaction_id: str) -> Optional[Transaction]:
        """Get the refund that references a purchase, if any."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        client_ids: Optional[Iterable[str]] = None,
        is_refund: Optional[bool] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        newest_first: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            client_ids: Optional owning client filter
            is_refund: If set, only refunds (True) or only purchases (False)
            start: Optional inclusive lower bound on created_at
            end: Optional exclusive upper bound on created_at
            newest_first: Order by created_at descending instead of ascending
        """
        pass

    @abstractmethod
    def get_refunded_ids(self, transaction_ids: Iterable[str]) -> set[str]:
        """Return the subset of purchase IDs that some refund references."""
        pass
