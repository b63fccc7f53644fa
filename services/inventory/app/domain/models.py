from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, Numeric, DateTime, Text, CheckConstraint
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

def utcnow() -> datetime:
    """Naive UTC timestamp, the single clock for every ledger column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

class Base(DeclarativeBase):
    pass

class TransactionKind(str, Enum):
    PURCHASE = "purchase"
    RESTOCK = "restock"

class StockTier(str, Enum):
    IN_STOCK = "in_stock"
    LOW = "low"
    OUT_OF_STOCK = "out_of_stock"

class Sweet(Base):
    """Catalog entry. Owned by the catalog, read by the ledger for prices only."""
    __tablename__ = "sweets"
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(100))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    # Denormalized browse counter; the ledger keeps its own authoritative count
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

class InventoryRecord(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    # Catalog reference, no FK so the catalog can live in another service
    item_id: Mapped[str] = mapped_column(String(36), unique=True, index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    last_restocked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_restocked_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class TransactionRecord(Base):
    """Append-only movement entry. Never updated or deleted."""
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_transactions_quantity_positive"),
        {"sqlite_autoincrement": True},
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    item_id: Mapped[str] = mapped_column(String(36), index=True)
    actor_id: Mapped[str] = mapped_column(String(36), index=True)
    kind: Mapped[str] = mapped_column(String(20), index=True)
    quantity: Mapped[int] = mapped_column(Integer)
    # Sale value for purchases; restocks carry none
    value: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
