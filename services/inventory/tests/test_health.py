from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from shared.core import ServiceHealth, HealthStatus
from app.main import app

def test_health():
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["service"] == "inventory-ledger"
    assert client.get("/health/live").json() == {"status": "alive"}

def test_ready_checks_ledger_tables():
    with TestClient(app) as client:
        resp = client.get("/health/ready")
    checks = resp.json()["checks"]
    assert checks["database:connectivity"]["status"] == "pass"
    assert checks["database:tables"]["status"] == "pass"

def test_missing_tables_fail_readiness(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    health = ServiceHealth("inventory-ledger", engine=engine)

    checks = health.perform_readiness_checks()

    assert checks["database:tables"]["status"] == HealthStatus.FAIL
    assert "inventory" in checks["database:tables"]["output"]
    assert health.calculate_overall_status(checks) == HealthStatus.FAIL
    engine.dispose()

def test_metrics():
    resp = TestClient(app).get("/metrics")
    assert resp.status_code == 200
    assert resp.json()["system"]["memory_rss_bytes"] > 0
