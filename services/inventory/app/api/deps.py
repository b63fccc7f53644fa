"""Request-scoped dependencies: the signed-in actor and the ledger components."""
from dataclasses import dataclass
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from shared.core import set_request_context
from app.auth_local import decode_access_token
from app.infrastructure.db import get_db
from app.infrastructure.catalog import get_catalog, CatalogStore
from app.application.ledger import StockLedger
from app.application.alerts import AlertDeriver
from app.application.transactions import TransactionQueryService

BEARER_PREFIX = "Bearer "

@dataclass(frozen=True)
class Actor:
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

def get_current_actor(request: Request) -> Actor:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Access token required")
    token = auth_header.split(" ", 1)[1]
    token_data = decode_access_token(token)
    if not token_data:
        raise HTTPException(status_code=401, detail="Invalid token")
    actor = Actor(id=str(token_data["sub"]), role=token_data["role"])
    set_request_context(actor_id=actor.id)
    return actor

def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor

def get_ledger(db: Session = Depends(get_db), catalog: CatalogStore = Depends(get_catalog)) -> StockLedger:
    return StockLedger(db, catalog)

def get_alert_deriver(db: Session = Depends(get_db)) -> AlertDeriver:
    return AlertDeriver(db)

def get_transaction_queries(db: Session = Depends(get_db)) -> TransactionQueryService:
    return TransactionQueryService(db)
