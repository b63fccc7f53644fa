import os
import tempfile
import uuid
from decimal import Decimal

# Must be in place before the app (and its module-level engine) is imported
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'inventory.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("CATALOG_SERVICE_URL", None)

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.auth_local import create_access_token
from app.core_settings import get_settings
from app.domain.models import Sweet
from app.infrastructure.db import build_engine, build_session_factory, get_db, init_models
from app.infrastructure.catalog import SqlCatalogStore
from app.application.ledger import StockLedger

@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}", get_settings())
    init_models(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def ledger(db):
    return StockLedger(db, SqlCatalogStore(db))

@pytest.fixture
def add_sweet(db):
    def _add(name="Gulab Jamun", price="120.00", category="Syrup-based"):
        sweet = Sweet(id=str(uuid.uuid4()), name=name, category=category, price=Decimal(price), quantity=0)
        db.add(sweet)
        db.commit()
        return sweet.id
    return _add

@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def _bearer(subject: str, role: str = "user") -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject, role=role)}"}

@pytest.fixture
def auth_headers():
    return _bearer

@pytest.fixture
def admin_headers():
    return _bearer("admin-1", role="admin")

@pytest.fixture
def user_headers():
    return _bearer("user-a")
