from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from app.core_settings import get_settings, Settings
from app.domain.models import Base

def build_engine(url: str, settings: Settings) -> Engine:
    if url.startswith("sqlite"):
        # Writers queue on the database lock instead of failing fast
        return create_engine(
            url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT},
        )
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )

def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, expire_on_commit=False)

settings = get_settings()
engine = build_engine(settings.database_url, settings)
SessionLocal = build_session_factory(engine)

def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_models(bind: Engine = engine):
    Base.metadata.create_all(bind)
