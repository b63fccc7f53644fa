"""
Inventory Ledger Service
Purchases, restocks, stock alerts and the transaction audit trail
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import os

from shared.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from app.core_settings import get_settings
from app.api.routes import router as inventory_router
from app.api.errors import register_exception_handlers
from app.infrastructure.db import engine, init_models

settings = get_settings()

SERVICE_NAME = "inventory-ledger"
SERVICE_VERSION = settings.SERVICE_VERSION
SERVICE_DESCRIPTION = "Inventory ledger: stock movements, alerts and transaction history"

setup_logging(service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {SERVICE_NAME} version {SERVICE_VERSION}",
        extra={'extra_fields': {
            'dialect': engine.dialect.name,
            'low_stock_threshold': settings.LOW_STOCK_THRESHOLD,
            'catalog': settings.CATALOG_SERVICE_URL or "database",
        }}
    )
    # Schema is created in place; there is no migration step
    init_models()
    yield
    logger.info(f"Shutting down {SERVICE_NAME}")
    engine.dispose()

app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

health_service = ServiceHealth(SERVICE_NAME, SERVICE_VERSION, engine)
app.include_router(health_service.create_health_router())
app.include_router(inventory_router)

@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

@app.get("/info")
async def info():
    """Service identity and the routes it serves, split by required role."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": os.getenv("ENVIRONMENT", "development"),
        "endpoints": {
            "any_actor": {
                "purchase": "POST /inventory/purchase",
                "my_transactions": "GET /inventory/transactions/my",
            },
            "admin": {
                "restock": "POST /inventory/restock",
                "status": "GET /inventory/status",
                "transactions": "GET /inventory/transactions",
                "alerts": "GET /inventory/alerts",
                "audit": "GET /inventory/audit/{item_id}",
            },
            "health": ["/health", "/health/live", "/health/ready", "/metrics"],
        }
    }
