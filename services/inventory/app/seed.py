"""Seed the catalog and opening stock from a CSV file.

Usage: python -m app.seed [--file sweets.csv] [--admin seed-admin]

Expected columns: name, category, price, quantity, description. Catalog rows
get deterministic ids derived from the name, and opening stock goes through
``StockLedger.restock`` so it shows up in the transaction history. Items that
already have an inventory record are not restocked again, so the seed can be
rerun safely.
"""
import argparse
import csv
import uuid
from decimal import Decimal
from pathlib import Path
from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.core import setup_logging, get_logger
from app.core_settings import get_settings
from app.domain.models import Sweet, InventoryRecord
from app.infrastructure.db import SessionLocal, init_models
from app.infrastructure.catalog import SqlCatalogStore
from app.application.ledger import StockLedger

DEFAULT_FILE = Path(__file__).parent / "seed_data" / "sweets.csv"
SEED_NAMESPACE = uuid.UUID("6f1c2b8e-4a7d-4c1e-9b53-2d8f0a7e5c11")

logger = get_logger(__name__)

def sweet_id_for(name: str) -> str:
    return str(uuid.uuid5(SEED_NAMESPACE, name.strip().lower()))

def load_rows(path: Path) -> list[dict]:
    with open(path, newline="", encoding="utf-8") as f:
        return [row for row in csv.DictReader(f) if row.get("name", "").strip()]

def seed(db: Session, rows: list[dict], admin_id: str) -> dict:
    """Upsert catalog rows, then restock items that have no inventory yet."""
    counts = {"created": 0, "updated": 0, "restocked": 0}
    opening_stock = {}
    for row in rows:
        sweet_id = sweet_id_for(row["name"])
        sweet = db.get(Sweet, sweet_id)
        if sweet is None:
            sweet = Sweet(id=sweet_id, name=row["name"].strip())
            db.add(sweet)
            counts["created"] += 1
        else:
            counts["updated"] += 1
        sweet.category = row.get("category", "").strip() or "Uncategorized"
        sweet.price = Decimal(row["price"])
        sweet.quantity = int(row.get("quantity") or 0)
        sweet.description = row.get("description") or None
        opening_stock[sweet_id] = sweet.quantity
    db.commit()

    stocked = set(db.execute(
        select(InventoryRecord.item_id).where(InventoryRecord.item_id.in_(opening_stock))
    ).scalars())
    ledger = StockLedger(db, SqlCatalogStore(db))
    for sweet_id, quantity in opening_stock.items():
        if sweet_id in stocked or quantity <= 0:
            continue
        ledger.restock(sweet_id, quantity, admin_id)
        counts["restocked"] += 1
    return counts

def main():
    parser = argparse.ArgumentParser(description="Seed the sweets catalog and opening stock")
    parser.add_argument("--file", type=Path, default=DEFAULT_FILE, help="CSV file to load")
    parser.add_argument("--admin", default="seed-admin", help="Actor id recorded on the restocks")
    args = parser.parse_args()

    setup_logging(service_name="inventory-seed", level=get_settings().LOG_LEVEL)
    init_models()
    db = SessionLocal()
    try:
        counts = seed(db, load_rows(args.file), args.admin)
    finally:
        db.close()
    logger.info(
        f"Seeded {args.file}",
        extra={'extra_fields': counts}
    )

if __name__ == "__main__":
    main()
