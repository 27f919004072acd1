from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from app.core.config import settings
import logging
import uuid
from datetime import datetime, timezone

logger = logging.getLogger("database")


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Local development / tests
        return {"connect_args": {"check_same_thread": False}, "echo": False}

    return {
        # Connection pooling configuration
        "poolclass": QueuePool,
        "pool_size": 10,                 # Base connections
        "max_overflow": 20,              # Additional connections under load
        "pool_pre_ping": True,           # Validate connections
        "pool_recycle": 3600,            # Recycle every hour
        "echo": False,
        "connect_args": {
            "options": "-c timezone=utc",
            "application_name": "electromart_backend",
        },
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection, connection_record):
    logger.info("DB connection established")

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def generate_id() -> str:
    """Opaque primary key for every storefront table"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
