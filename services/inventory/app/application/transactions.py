"""Filterable, paginated reads over the transaction log."""
import math
from dataclasses import dataclass
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.domain.models import TransactionRecord, TransactionKind
from .errors import InvalidFilter

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_FIELD_MESSAGES = {
    "kind": 'kind must be either "purchase" or "restock"',
    "page": "page must be a positive integer",
    "limit": f"limit must be between 1 and {MAX_PAGE_SIZE}",
}

class TransactionFilters(BaseModel):
    """The complete set of supported filters, AND-combined."""
    item_id: Optional[str] = None
    kind: Optional[TransactionKind] = None
    actor_id: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    class Config:
        extra = "forbid"
        frozen = True

    @classmethod
    def build(cls, **raw) -> "TransactionFilters":
        """Validate raw parameters, dropping unset ones; raises InvalidFilter."""
        try:
            return cls(**{k: v for k, v in raw.items() if v is not None})
        except ValidationError as e:
            errors = []
            for err in e.errors():
                name = str(err["loc"][0]) if err["loc"] else "filters"
                errors.append({"field": name, "message": _FIELD_MESSAGES.get(name, err["msg"])})
            raise InvalidFilter(errors) from e

@dataclass
class TransactionPage:
    transactions: List[TransactionRecord]
    total_count: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

class TransactionQueryService:
    def __init__(self, db: Session):
        self.db = db

    def query(self, filters: Optional[TransactionFilters] = None) -> TransactionPage:
        filters = filters or TransactionFilters()
        conditions = []
        # An empty id is a filter that matches nothing, not "no filter"
        if filters.item_id is not None:
            conditions.append(TransactionRecord.item_id == filters.item_id)
        if filters.kind is not None:
            conditions.append(TransactionRecord.kind == filters.kind.value)
        if filters.actor_id is not None:
            conditions.append(TransactionRecord.actor_id == filters.actor_id)

        total_count = self.db.execute(
            select(func.count()).select_from(TransactionRecord).where(*conditions)
        ).scalar_one()
        # id breaks occurred_at ties so page boundaries are deterministic
        transactions = self.db.execute(
            select(TransactionRecord)
            .where(*conditions)
            .order_by(TransactionRecord.occurred_at.desc(), TransactionRecord.id.desc())
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        ).scalars().all()
        return TransactionPage(
            transactions=list(transactions),
            total_count=total_count,
            page=filters.page,
            limit=filters.limit,
        )

    def for_actor(self, actor_id: str, page: Optional[int] = None, limit: Optional[int] = None) -> TransactionPage:
        """The caller's own history; same query, pinned to one actor."""
        return self.query(TransactionFilters.build(actor_id=actor_id, page=page, limit=limit))
