"""Stock ledger: the only writer of inventory quantities.

Every accepted movement changes ``InventoryRecord.quantity`` and appends one
``TransactionRecord`` inside the same database transaction. The stock check
for a purchase lives in the UPDATE's WHERE clause, so two purchases racing on
one item are serialized by the row lock instead of by application code, and
purchases on different items never wait for each other.
"""
from dataclasses import dataclass
from decimal import Decimal
from sqlalchemy import select, update, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from shared.core import get_logger
from app.domain.models import InventoryRecord, TransactionRecord, TransactionKind, utcnow
from app.infrastructure.catalog import CatalogStore
from .errors import InvalidQuantity, ItemNotFound, InsufficientStock, UnsupportedDialect

logger = get_logger(__name__)

# Dialects offering INSERT ... ON CONFLICT DO UPDATE
_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

@dataclass(frozen=True)
class PurchaseResult:
    transaction: TransactionRecord
    remaining_stock: int

@dataclass(frozen=True)
class RestockResult:
    transaction: TransactionRecord
    new_stock: int

@dataclass(frozen=True)
class LedgerAudit:
    """Stored quantity next to the quantity implied by the transaction log."""
    item_id: str
    quantity: int
    restocked: int
    purchased: int

    @property
    def ledger_quantity(self) -> int:
        return self.restocked - self.purchased

    @property
    def consistent(self) -> bool:
        return self.quantity == self.ledger_quantity

def validate_quantity(quantity) -> int:
    # bool is an int subclass
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)
    return quantity

class StockLedger:
    def __init__(self, db: Session, catalog: CatalogStore):
        self.db = db
        self.catalog = catalog
        dialect = db.get_bind().dialect.name
        if dialect not in _UPSERT_DIALECTS:
            raise UnsupportedDialect(dialect)
        self._insert = _UPSERT_DIALECTS[dialect]

    def purchase(self, item_id: str, quantity: int, actor_id: str) -> PurchaseResult:
        """Take ``quantity`` units out of stock and record the sale.

        Raises InvalidQuantity, ItemNotFound or InsufficientStock; on any
        failure nothing is written.
        """
        quantity = validate_quantity(quantity)
        try:
            result = self.db.execute(
                update(InventoryRecord)
                .where(
                    InventoryRecord.item_id == item_id,
                    InventoryRecord.quantity >= quantity,
                )
                .values(quantity=InventoryRecord.quantity - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self._reject_purchase(item_id, quantity, actor_id)

            record = self._current_record(item_id)
            occurred_at = self._advance_clock(record)
            transaction = TransactionRecord(
                item_id=item_id,
                actor_id=actor_id,
                kind=TransactionKind.PURCHASE.value,
                quantity=quantity,
                value=(record.unit_price or Decimal("0")) * quantity,
                occurred_at=occurred_at,
            )
            self.db.add(transaction)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Purchase recorded for {item_id}",
            extra={'extra_fields': {
                'item_id': item_id,
                'actor_id': actor_id,
                'quantity': quantity,
                'remaining_stock': record.quantity,
                'transaction_id': transaction.id,
            }}
        )
        return PurchaseResult(transaction=transaction, remaining_stock=record.quantity)

    def restock(self, item_id: str, quantity: int, actor_id: str) -> RestockResult:
        """Add ``quantity`` units, creating the inventory record on first restock."""
        quantity = validate_quantity(quantity)
        # Read before the atomic unit: a concurrent price change may land either side
        unit_price = self.catalog.get_unit_price(item_id)

        table = InventoryRecord.__table__
        stmt = self._insert(table).values(
            item_id=item_id,
            quantity=quantity,
            unit_price=unit_price if unit_price is not None else Decimal("0"),
            last_updated_at=utcnow(),
        )
        changes = {"quantity": table.c.quantity + stmt.excluded.quantity}
        if unit_price is not None:
            changes["unit_price"] = stmt.excluded.unit_price
        stmt = stmt.on_conflict_do_update(index_elements=[table.c.item_id], set_=changes)

        try:
            self.db.execute(stmt)
            record = self._current_record(item_id)
            occurred_at = self._advance_clock(record)
            record.last_restocked_at = occurred_at
            record.last_restocked_by = actor_id
            transaction = TransactionRecord(
                item_id=item_id,
                actor_id=actor_id,
                kind=TransactionKind.RESTOCK.value,
                quantity=quantity,
                value=None,
                occurred_at=occurred_at,
            )
            self.db.add(transaction)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Restock recorded for {item_id}",
            extra={'extra_fields': {
                'item_id': item_id,
                'actor_id': actor_id,
                'quantity': quantity,
                'new_stock': record.quantity,
                'transaction_id': transaction.id,
            }}
        )
        return RestockResult(transaction=transaction, new_stock=record.quantity)

    def get_record(self, item_id: str) -> InventoryRecord:
        record = self.db.execute(
            select(InventoryRecord).where(InventoryRecord.item_id == item_id)
        ).scalar_one_or_none()
        if record is None:
            raise ItemNotFound(item_id)
        return record

    def audit(self, item_id: str) -> LedgerAudit:
        """Compare the stored quantity with the net of the item's transactions.

        Both sides come from one statement so they share a snapshot.
        """
        restocked = self._moved(item_id, TransactionKind.RESTOCK)
        purchased = self._moved(item_id, TransactionKind.PURCHASE)
        row = self.db.execute(
            select(InventoryRecord.quantity, restocked, purchased)
            .where(InventoryRecord.item_id == item_id)
        ).one_or_none()
        if row is None:
            raise ItemNotFound(item_id)
        return LedgerAudit(
            item_id=item_id,
            quantity=row[0],
            restocked=int(row[1]),
            purchased=int(row[2]),
        )

    def _moved(self, item_id: str, kind: TransactionKind):
        return (
            select(func.coalesce(func.sum(TransactionRecord.quantity), 0))
            .where(TransactionRecord.item_id == item_id, TransactionRecord.kind == kind.value)
            .scalar_subquery()
        )

    def _reject_purchase(self, item_id: str, quantity: int, actor_id: str):
        available = self.db.execute(
            select(InventoryRecord.quantity).where(InventoryRecord.item_id == item_id)
        ).scalar_one_or_none()
        logger.warning(
            f"Purchase rejected for {item_id}",
            extra={'extra_fields': {
                'item_id': item_id,
                'actor_id': actor_id,
                'requested': quantity,
                'available': available,
            }}
        )
        if available is None:
            raise ItemNotFound(item_id)
        raise InsufficientStock(item_id, available=available, requested=quantity)

    def _current_record(self, item_id: str) -> InventoryRecord:
        # Row is write-locked by this transaction at this point
        return self.db.execute(
            select(InventoryRecord)
            .where(InventoryRecord.item_id == item_id)
            .execution_options(populate_existing=True)
        ).scalar_one()

    def _advance_clock(self, record: InventoryRecord):
        """Next per-item timestamp; never earlier than the record's last update."""
        now = utcnow()
        occurred_at = max(now, record.last_updated_at) if record.last_updated_at else now
        record.last_updated_at = occurred_at
        return occurred_at
