from fastapi import APIRouter, Depends
from typing import Optional
from app.api.deps import (
    Actor,
    get_current_actor,
    require_admin,
    get_ledger,
    get_alert_deriver,
    get_transaction_queries,
)
from app.application.ledger import StockLedger
from app.application.alerts import AlertDeriver
from app.application.transactions import TransactionQueryService, TransactionFilters, TransactionPage
from app.application.schemas import (
    StockMovementRequest,
    TransactionRead,
    InventoryRead,
    InventoryStatusRead,
    PurchaseData,
    PurchaseResponse,
    RestockData,
    RestockResponse,
    StatusResponse,
    AlertsData,
    AlertsResponse,
    TransactionPageData,
    TransactionPageResponse,
    AuditData,
    AuditResponse,
)

router = APIRouter(prefix="/inventory", tags=["inventory"])

def _page_data(result: TransactionPage) -> TransactionPageData:
    return TransactionPageData(
        transactions=[TransactionRead.model_validate(t) for t in result.transactions],
        total_count=result.total_count,
        total_pages=result.total_pages,
        page=result.page,
        has_next=result.has_next,
        has_prev=result.has_prev,
    )

@router.post("/purchase", response_model=PurchaseResponse)
def purchase(
    payload: StockMovementRequest,
    actor: Actor = Depends(get_current_actor),
    ledger: StockLedger = Depends(get_ledger),
):
    """Buy ``quantity`` units of an item (any signed-in actor)."""
    result = ledger.purchase(payload.item_id, payload.quantity, actor.id)
    return PurchaseResponse(data=PurchaseData(
        transaction=TransactionRead.model_validate(result.transaction),
        remaining_stock=result.remaining_stock,
    ))

@router.post("/restock", response_model=RestockResponse)
def restock(
    payload: StockMovementRequest,
    actor: Actor = Depends(require_admin),
    ledger: StockLedger = Depends(get_ledger),
):
    """Add stock to an item, creating its inventory record if needed (admin only)."""
    result = ledger.restock(payload.item_id, payload.quantity, actor.id)
    return RestockResponse(data=RestockData(
        transaction=TransactionRead.model_validate(result.transaction),
        new_stock=result.new_stock,
    ))

@router.get("/status", response_model=StatusResponse)
def inventory_status(
    threshold: Optional[int] = None,
    actor: Actor = Depends(require_admin),
    alerts: AlertDeriver = Depends(get_alert_deriver),
):
    return StatusResponse(data=[
        InventoryStatusRead(**InventoryRead.model_validate(record).model_dump(), status=tier)
        for record, tier in alerts.get_status(threshold)
    ])

@router.get("/transactions", response_model=TransactionPageResponse)
def transaction_history(
    item_id: Optional[str] = None,
    kind: Optional[str] = None,
    actor_id: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    actor: Actor = Depends(require_admin),
    queries: TransactionQueryService = Depends(get_transaction_queries),
):
    """All movements, newest first, filterable by item, kind and actor (admin only)."""
    filters = TransactionFilters.build(item_id=item_id, kind=kind, actor_id=actor_id, page=page, limit=limit)
    return TransactionPageResponse(data=_page_data(queries.query(filters)))

@router.get("/transactions/my", response_model=TransactionPageResponse)
def my_transaction_history(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    actor: Actor = Depends(get_current_actor),
    queries: TransactionQueryService = Depends(get_transaction_queries),
):
    """The signed-in actor's own movements."""
    return TransactionPageResponse(data=_page_data(queries.for_actor(actor.id, page=page, limit=limit)))

@router.get("/alerts", response_model=AlertsResponse)
def stock_alerts(
    threshold: Optional[int] = None,
    actor: Actor = Depends(require_admin),
    alerts: AlertDeriver = Depends(get_alert_deriver),
):
    result = alerts.get_stock_alerts(threshold)
    return AlertsResponse(data=AlertsData(
        low_stock=[InventoryRead.model_validate(r) for r in result.low_stock],
        out_of_stock=[InventoryRead.model_validate(r) for r in result.out_of_stock],
        alert_count=result.alert_count,
    ))

@router.get("/audit/{item_id}", response_model=AuditResponse)
def audit_item(
    item_id: str,
    actor: Actor = Depends(require_admin),
    ledger: StockLedger = Depends(get_ledger),
):
    """Reconcile an item's stored quantity against its transaction log (admin only)."""
    audit = ledger.audit(item_id)
    return AuditResponse(data=AuditData(
        item_id=audit.item_id,
        quantity=audit.quantity,
        restocked=audit.restocked,
        purchased=audit.purchased,
        ledger_quantity=audit.ledger_quantity,
        consistent=audit.consistent,
    ))
