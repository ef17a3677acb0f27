import asyncio
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from structlog import get_logger

from lightbnb.config import settings
from lightbnb.errors import StoreError

logger = get_logger()

# One pooled engine per process, created on first use
engine: AsyncEngine | None = None

def get_engine() -> AsyncEngine:
    global engine
    if engine is None:
        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
            connect_args={"command_timeout": settings.DB_COMMAND_TIMEOUT},
        )
    return engine

async def dispose_engine():
    global engine
    if engine is not None:
        await engine.dispose()
        engine = None

class DatabaseStore:
    """Runs raw statements with positional ``$n`` parameters against PostgreSQL."""

    def __init__(self, engine: AsyncEngine | None = None):
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine or get_engine()

    async def execute(self, query_text: str, parameters: Sequence[Any] = ()) -> list[dict]:
        try:
            async with self.engine.begin() as conn:
                result = await conn.exec_driver_sql(query_text, tuple(parameters))
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings()]
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error("Store statement failed", error=f"{type(e).__name__}: {e}")
            raise StoreError(str(e)) from e

_default_store: DatabaseStore | None = None

def get_store() -> DatabaseStore:
    global _default_store
    if _default_store is None:
        _default_store = DatabaseStore()
    return _default_store

async def check_database(store: DatabaseStore | None = None) -> dict:
    store = store or get_store()
    try:
        await store.execute("SELECT 1")
    except StoreError as e:
        return {"status": "error", "error": str(e)}
    logger.info("Connected to the database")
    return {"status": "ok"}
