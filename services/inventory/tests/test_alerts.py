import pytest

from app.domain.models import StockTier
from app.application.alerts import AlertDeriver, classify
from app.application.errors import InvalidThreshold

@pytest.fixture
def stocked(db, ledger):
    # quantities: empty 0, few 3, edge 5, plenty 40
    for item_id, quantity in [("plenty", 40), ("edge", 5), ("few", 3), ("empty", 2)]:
        ledger.restock(item_id, quantity, "admin-1")
    ledger.purchase("empty", 2, "user-a")
    return AlertDeriver(db)

def test_out_of_stock_is_not_also_low(stocked):
    alerts = stocked.get_stock_alerts(5)

    assert [r.item_id for r in alerts.out_of_stock] == ["empty"]
    assert [r.item_id for r in alerts.low_stock] == ["edge", "few"]
    assert alerts.alert_count == 3

def test_default_threshold_comes_from_settings(stocked):
    alerts = stocked.get_stock_alerts()
    assert {r.item_id for r in alerts.low_stock} == {"edge", "few"}

def test_zero_threshold_only_reports_empty_items(stocked):
    alerts = stocked.get_stock_alerts(0)
    assert alerts.low_stock == []
    assert [r.item_id for r in alerts.out_of_stock] == ["empty"]

def test_status_lists_every_item_with_tier(stocked):
    status = {record.item_id: tier for record, tier in stocked.get_status(4)}
    assert status == {
        "edge": StockTier.IN_STOCK,
        "empty": StockTier.OUT_OF_STOCK,
        "few": StockTier.LOW,
        "plenty": StockTier.IN_STOCK,
    }

def test_no_inventory_no_alerts(db):
    alerts = AlertDeriver(db).get_stock_alerts(5)
    assert alerts.alert_count == 0

@pytest.mark.parametrize("threshold", [-1, 2.5, True, "5"])
def test_invalid_threshold(db, threshold):
    with pytest.raises(InvalidThreshold) as exc_info:
        AlertDeriver(db).get_stock_alerts(threshold)
    assert exc_info.value.status_code == 400

@pytest.mark.parametrize("quantity,expected", [
    (0, StockTier.OUT_OF_STOCK),
    (1, StockTier.LOW),
    (5, StockTier.LOW),
    (6, StockTier.IN_STOCK),
])
def test_classify(quantity, expected):
    assert classify(quantity, 5) is expected

def test_repeated_alerts_are_identical(stocked):
    def snapshot(alerts):
        return (
            [(r.item_id, r.quantity) for r in alerts.low_stock],
            [(r.item_id, r.quantity) for r in alerts.out_of_stock],
            alerts.alert_count,
        )

    assert snapshot(stocked.get_stock_alerts(5)) == snapshot(stocked.get_stock_alerts(5))
