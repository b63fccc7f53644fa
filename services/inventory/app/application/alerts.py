"""Stock-status tiers derived from the current inventory snapshot."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core_settings import get_settings
from app.domain.models import InventoryRecord, StockTier
from .errors import InvalidThreshold

@dataclass
class StockAlerts:
    low_stock: List[InventoryRecord] = field(default_factory=list)
    out_of_stock: List[InventoryRecord] = field(default_factory=list)

    @property
    def alert_count(self) -> int:
        return len(self.low_stock) + len(self.out_of_stock)

def classify(quantity: int, threshold: int) -> StockTier:
    if quantity == 0:
        return StockTier.OUT_OF_STOCK
    if quantity <= threshold:
        return StockTier.LOW
    return StockTier.IN_STOCK

class AlertDeriver:
    """Read-only; a slightly stale snapshot is acceptable, so no locks are taken."""

    def __init__(self, db: Session):
        self.db = db

    def _threshold(self, threshold: Optional[int]) -> int:
        if threshold is None:
            return get_settings().LOW_STOCK_THRESHOLD
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise InvalidThreshold(threshold)
        return threshold

    def _snapshot(self) -> List[InventoryRecord]:
        return list(self.db.execute(
            select(InventoryRecord).order_by(InventoryRecord.item_id)
        ).scalars())

    def get_status(self, threshold: Optional[int] = None) -> List[Tuple[InventoryRecord, StockTier]]:
        threshold = self._threshold(threshold)
        return [(record, classify(record.quantity, threshold)) for record in self._snapshot()]

    def get_stock_alerts(self, threshold: Optional[int] = None) -> StockAlerts:
        alerts = StockAlerts()
        for record, tier in self.get_status(threshold):
            if tier is StockTier.OUT_OF_STOCK:
                alerts.out_of_stock.append(record)
            elif tier is StockTier.LOW:
                alerts.low_stock.append(record)
        return alerts
