"""Domain model entities for bonusledger.

These are pure data classes representing business concepts, independent of
database schema. Monetary fields are ``Decimal`` values rounded to cents and
timestamps are timezone-aware UTC datetimes.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ClientRole(str, Enum):
    """Kind of loyalty client."""

    CLIENT = "client"
    MASTER = "master"


@dataclass(frozen=True)
class ClientVin:
    """Vehicle identification number registered for a client."""

    id: str
    client_id: str
    vin: str
    machine_label: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Client:
    """Loyalty client with cached ledger totals.

    ``bonus_balance``, ``total_purchases_sum`` and ``total_orders_count`` are a
    cache over the client's transaction log.
    """

    id: str
    name: str
    phone: Optional[str]
    role: ClientRole
    bonus_balance: Decimal
    total_purchases_sum: Decimal
    total_orders_count: int
    created_at: datetime
    vins: tuple[ClientVin, ...] = ()


@dataclass(frozen=True)
class Transaction:
    """Ledger entry: a purchase or the refund of one."""

    id: str
    client_id: str
    purchase_amount: Decimal
    bonus_used: Decimal
    bonus_earned: Decimal
    final_paid: Decimal
    created_at: datetime
    is_refund: bool = False
    refund_for: Optional[str] = None


@dataclass(frozen=True)
class SalesTransaction(Transaction):
    """Purchase annotated with whether a refund references it."""

    is_refunded: bool = False


@dataclass(frozen=True)
class PurchaseSummary:
    """Short purchase row used for client purchase history."""

    id: str
    created_at: datetime
    purchase_amount: Decimal


@dataclass
class DailySummary:
    """Aggregated sales for one UTC calendar day."""

    date: date
    orders_count: int = 0
    total_purchase_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    total_final_paid: Decimal = field(default_factory=lambda: Decimal("0.00"))
    total_bonus_used: Decimal = field(default_factory=lambda: Decimal("0.00"))
    total_bonus_earned: Decimal = field(default_factory=lambda: Decimal("0.00"))


@dataclass(frozen=True)
class LedgerTotals:
    """Client totals as derived by replaying the transaction log."""

    bonus_balance: Decimal
    total_purchases_sum: Decimal
    total_orders_count: int
