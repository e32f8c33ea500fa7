"""
Conexión a base de datos (PostgreSQL en producción, SQLite en desarrollo/tests)

Centraliza el acceso vía SQLAlchemy ORM:
- Engine + SessionLocal
- Base declarativa para los modelos
- get_db como dependencia de FastAPI
- ping con retry para el health check
"""
import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> dict:
    """Pool options per backend"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases only live as long as their single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs

    return {
        "pool_pre_ping": True,  # Verificar conexión antes de usar
        "pool_size": 10,
        "max_overflow": 20,
    }


# ============================================================================
# SQLAlchemy Configuration
# ============================================================================

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    FastAPI dependency para obtener sesión de SQLAlchemy

    Usage:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create every table registered on Base"""
    # Import models so they register on Base.metadata
    from store_admin import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping_database_with_retry(max_retries=3, retry_delay=1.0) -> float:
    """
    Run SELECT 1 with exponential backoff on connection failures

    Args:
        max_retries: Maximum number of attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        Query latency in milliseconds

    Raises:
        OperationalError: If all retry attempts fail
    """
    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database ping attempt {attempt}/{max_retries}")
            start = time.time()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return round((time.time() - start) * 1000, 2)

        except OperationalError as e:
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt >= max_retries:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

            delay = retry_delay * (2 ** (attempt - 1))
            logger.info(f"Retrying in {delay:.2f} seconds...")
            time.sleep(delay)
