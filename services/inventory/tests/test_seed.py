from decimal import Decimal

from sqlalchemy import select, func

from app.domain.models import Sweet, TransactionRecord
from app.application.ledger import StockLedger
from app.infrastructure.catalog import SqlCatalogStore
from app.seed import DEFAULT_FILE, load_rows, seed, sweet_id_for

ROWS = [
    {"name": "Kaju Katli", "category": "Dry Fruits", "price": "450.00", "quantity": "15", "description": "Cashew fudge"},
    {"name": "Soan Papdi", "category": "Flaky", "price": "150.00", "quantity": "0", "description": ""},
]

def test_bundled_csv_loads():
    rows = load_rows(DEFAULT_FILE)
    assert len(rows) == 7
    assert {"name", "category", "price", "quantity", "description"} <= set(rows[0])

def test_seed_restocks_through_the_ledger(db):
    counts = seed(db, ROWS, "seed-admin")

    assert counts == {"created": 2, "updated": 0, "restocked": 1}
    ledger = StockLedger(db, SqlCatalogStore(db))
    record = ledger.get_record(sweet_id_for("Kaju Katli"))
    assert record.quantity == 15
    assert record.unit_price == Decimal("450")
    assert record.last_restocked_by == "seed-admin"
    assert ledger.audit(record.item_id).consistent
    assert db.get(Sweet, sweet_id_for("Soan Papdi")).description is None

def test_rerun_does_not_restock_again(db):
    seed(db, ROWS, "seed-admin")
    counts = seed(db, ROWS, "seed-admin")

    assert counts == {"created": 0, "updated": 2, "restocked": 0}
    assert db.execute(select(func.count()).select_from(TransactionRecord)).scalar_one() == 1
