from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from storefront.core.config import settings
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for PostgreSQL (pooled) or SQLite (local runs and tests)."""
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
    else:
        options = {
            "poolclass": QueuePool,
            "pool_size": 10,              # Base connections
            "max_overflow": 20,           # Additional connections under load
            "pool_pre_ping": True,        # Validate connections
            "pool_recycle": 3600,         # Recycle every hour
        }
    options.update(kwargs)
    return create_engine(database_url, echo=False, **options)


# SQLite only checks foreign keys when asked to
@event.listens_for(Engine, "connect")
def receive_connect(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    logger.debug("DB connection established")


engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()
