"""SQLAlchemy models for bonusledger database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    """Current time as naive UTC, the storage convention for timestamps."""
    return datetime.now(UTC).replace(tzinfo=None)


class Client(Base):
    """Loyalty client model with cached ledger totals."""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    phone = Column(String, unique=True, nullable=True)
    role = Column(String(16), nullable=False, default="client")
    bonus_balance = Column(MONEY, nullable=False, default=0)
    total_purchases_sum = Column(MONEY, nullable=False, default=0)
    total_orders_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    vins = relationship(
        "ClientVin",
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ClientVin.created_at",
    )


class ClientVin(Base):
    """Vehicle registered for a client."""

    __tablename__ = "client_vins"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    vin = Column(String(17), nullable=False)
    machine_label = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("client_id", "vin", name="uq_client_vin"),)

    # Relationships
    client = relationship("Client", back_populates="vins")


class Transaction(Base):
    """Append-only ledger entry: a purchase or a refund of one."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    purchase_amount = Column(MONEY, nullable=False)
    bonus_used = Column(MONEY, nullable=False, default=0)
    bonus_earned = Column(MONEY, nullable=False, default=0)
    final_paid = Column(MONEY, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
    is_refund = Column(Boolean, default=False, nullable=False)
    refund_for = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=True)

    # One refund per purchase; NULLs (purchases) are not compared
    __table_args__ = (
        UniqueConstraint("refund_for", name="uq_transaction_refund_for"),
        CheckConstraint(
            "(is_refund AND refund_for IS NOT NULL) OR (NOT is_refund AND refund_for IS NULL)",
            name="ck_transaction_refund_link",
        ),
    )

    # Relationships
    client = relationship("Client", back_populates="transactions")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on FK enforcement so ON DELETE CASCADE works under SQLite."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
