"""SQLAlchemy models for piggybank database."""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Enum,
    Index,
    UniqueConstraint,
    Uuid,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

from piggybank.domain.entities import AccountType, Currency, ReconcileStatus

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Amount(TypeDecorator):
    """Exact money column.

    NUMERIC(19, 4) where the database has a real decimal type. SQLite stores
    NUMERIC as a binary float, so there the plain decimal text is stored and
    parsed back into a Decimal.
    """

    impl = Numeric(19, 4)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(32))
        return dialect.type_descriptor(Numeric(19, 4, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return format(Decimal(value), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value))


class Account(Base):
    """Chart-of-accounts node; the hierarchy is a plain parent pointer."""

    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)
    parent_id = Column(Uuid, ForeignKey("accounts.id"), nullable=True)
    name = Column(String(100), nullable=False)
    # e.g. "Assets:Bank:Checking"
    full_name = Column(String(500), nullable=False)
    account_type = Column(Enum(AccountType, native_enum=False, length=20), nullable=False)
    currency = Column(Enum(Currency, native_enum=False, length=10), nullable=False)
    placeholder = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # Root siblings (parent_id NULL) are checked in AccountService
    __table_args__ = (
        UniqueConstraint("owner_id", "parent_id", "name", name="uq_account_owner_parent_name"),
    )

    splits = relationship("Split", back_populates="account")


class Transaction(Base):
    """Transaction header; splits hold the actual postings."""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False)
    sequence = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    num = Column(String(50), nullable=True)
    description = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    voided = Column(Boolean, default=False, nullable=False)
    void_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (Index("idx_transactions_owner_date", "owner_id", "date"),)

    splits = relationship(
        "Split",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Split.position",
    )


class Split(Base):
    """Signed posting of a transaction to one account."""

    __tablename__ = "splits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    transaction_id = Column(Uuid, ForeignKey("transactions.id"), nullable=False, index=True)
    account_id = Column(Uuid, ForeignKey("accounts.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    amount = Column(Amount, nullable=False)
    currency = Column(Enum(Currency, native_enum=False, length=10), nullable=False)
    memo = Column(String(255), nullable=True)
    reconcile_status = Column(
        Enum(ReconcileStatus, native_enum=False, length=15),
        default=ReconcileStatus.NEW,
        nullable=False,
    )
    created_at = Column(DateTime, default=_now, nullable=False)

    transaction = relationship("Transaction", back_populates="splits")
    account = relationship("Account", back_populates="splits")


def create_session_factory(
    database_url: str, isolation_level: Optional[str] = None
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine_options = {"echo": False}
    if isolation_level:
        engine_options["isolation_level"] = isolation_level
    engine = create_engine(database_url, **engine_options)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
