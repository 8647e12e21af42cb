"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. It also restores the UTC timezone
that SQLite drops and re-rounds money columns that SQLite keeps as floats.
"""

from bonusledger.domain import entities as domain
from bonusledger.database.models import (
    Client as ORMClient,
    ClientVin as ORMClientVin,
    Transaction as ORMTransaction,
)
from bonusledger.utils.date_parser import as_utc
from bonusledger.utils.money import round_money


def client_vin_to_domain(orm_vin: ORMClientVin) -> domain.ClientVin:
    """Convert SQLAlchemy ClientVin model to domain ClientVin entity."""
    return domain.ClientVin(
        id=orm_vin.id,
        client_id=orm_vin.client_id,
        vin=orm_vin.vin,
        machine_label=orm_vin.machine_label,
        created_at=as_utc(orm_vin.created_at),
    )


def client_to_domain(orm_client: ORMClient, include_vins: bool = True) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    vins: tuple[domain.ClientVin, ...] = ()
    if include_vins:
        vins = tuple(client_vin_to_domain(v) for v in orm_client.vins)
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        phone=orm_client.phone,
        role=domain.ClientRole(orm_client.role),
        bonus_balance=round_money(orm_client.bonus_balance),
        total_purchases_sum=round_money(orm_client.total_purchases_sum),
        total_orders_count=orm_client.total_orders_count,
        created_at=as_utc(orm_client.created_at),
        vins=vins,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        client_id=orm_transaction.client_id,
        purchase_amount=round_money(orm_transaction.purchase_amount),
        bonus_used=round_money(orm_transaction.bonus_used),
        bonus_earned=round_money(orm_transaction.bonus_earned),
        final_paid=round_money(orm_transaction.final_paid),
        created_at=as_utc(orm_transaction.created_at),
        is_refund=bool(orm_transaction.is_refund),
        refund_for=orm_transaction.refund_for,
    )
