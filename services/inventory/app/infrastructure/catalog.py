"""Catalog Store collaborator: unit price lookups for restocks."""
from decimal import Decimal, InvalidOperation
from typing import Optional, Protocol
import httpx
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.core import get_logger
from app.core_settings import get_settings
from app.domain.models import Sweet
from app.infrastructure.db import get_db

logger = get_logger(__name__)

class CatalogStore(Protocol):
    def get_unit_price(self, item_id: str) -> Optional[Decimal]:
        ...

class SqlCatalogStore:
    """Reads prices from the ``sweets`` table in the shared database."""

    def __init__(self, db: Session):
        self.db = db

    def get_unit_price(self, item_id: str) -> Optional[Decimal]:
        return self.db.execute(
            select(Sweet.price).where(Sweet.id == item_id)
        ).scalar_one_or_none()

class HttpCatalogStore:
    """Fetches prices from a remote catalog service."""

    def __init__(self, base_url: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def get_unit_price(self, item_id: str) -> Optional[Decimal]:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(f"{self.base_url}/sweets/{item_id}")
        except httpx.HTTPError as e:
            logger.warning(
                f"Catalog lookup failed for {item_id}: {e}",
                extra={'extra_fields': {'item_id': item_id}},
            )
            return None
        if response.status_code != 200:
            logger.warning(
                f"Catalog has no price for {item_id}",
                extra={'extra_fields': {'item_id': item_id, 'status_code': response.status_code}},
            )
            return None
        payload = response.json()
        # Catalog responses may or may not be wrapped in a {"data": ...} envelope
        sweet = payload.get("data", payload) if isinstance(payload, dict) else None
        if not sweet or sweet.get("price") is None:
            return None
        try:
            return Decimal(str(sweet["price"]))
        except InvalidOperation:
            logger.warning(f"Catalog returned a non-numeric price for {item_id}")
            return None

def get_catalog(db: Session = Depends(get_db)) -> CatalogStore:
    settings = get_settings()
    if settings.CATALOG_SERVICE_URL:
        return HttpCatalogStore(settings.CATALOG_SERVICE_URL, settings.CATALOG_TIMEOUT_SECONDS)
    return SqlCatalogStore(db)
