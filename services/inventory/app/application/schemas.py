from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from app.domain.models import TransactionKind, StockTier

class StockMovementRequest(BaseModel):
    """Body of both purchase and restock requests.

    ``quantity`` is passed through untouched so the ledger rejects booleans,
    numeric strings, floats and a missing value as InvalidQuantity.
    """
    item_id: str = Field(..., min_length=1)
    quantity: Any = Field(None, description="Positive integer number of units")

    class Config:
        str_strip_whitespace = True

class TransactionRead(BaseModel):
    id: int
    item_id: str
    actor_id: str
    kind: TransactionKind
    quantity: int
    value: Optional[Decimal] = None
    occurred_at: datetime
    class Config:
        from_attributes = True

class InventoryRead(BaseModel):
    item_id: str
    quantity: int
    unit_price: Decimal
    last_restocked_at: Optional[datetime] = None
    last_restocked_by: Optional[str] = None
    last_updated_at: datetime
    class Config:
        from_attributes = True

class InventoryStatusRead(InventoryRead):
    status: StockTier

class PurchaseData(BaseModel):
    transaction: TransactionRead
    remaining_stock: int

class RestockData(BaseModel):
    transaction: TransactionRead
    new_stock: int

class AlertsData(BaseModel):
    low_stock: list[InventoryRead]
    out_of_stock: list[InventoryRead]
    alert_count: int

class TransactionPageData(BaseModel):
    transactions: list[TransactionRead]
    total_count: int
    total_pages: int
    page: int
    has_next: bool
    has_prev: bool

class AuditData(BaseModel):
    item_id: str
    quantity: int
    restocked: int
    purchased: int
    ledger_quantity: int
    consistent: bool

# Response envelopes: {"success": ..., "message": ..., "data": ...}

class PurchaseResponse(BaseModel):
    success: bool = True
    message: str = "Purchase completed successfully"
    data: PurchaseData

class RestockResponse(BaseModel):
    success: bool = True
    message: str = "Restock completed successfully"
    data: RestockData

class StatusResponse(BaseModel):
    success: bool = True
    data: list[InventoryStatusRead]

class AlertsResponse(BaseModel):
    success: bool = True
    data: AlertsData

class TransactionPageResponse(BaseModel):
    success: bool = True
    data: TransactionPageData

class AuditResponse(BaseModel):
    success: bool = True
    data: AuditData
