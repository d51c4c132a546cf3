import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from fleet_registry.utils.exceptions import ConflictError, StorageUnavailableError

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return _is_sqlite(url) and make_url(url).database in (None, "", ":memory:")


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the engine and session factory for one application instance.

    Built in the application lifespan, kept on ``app.state.db`` and disposed on
    shutdown. Request handlers get sessions through :func:`get_db`.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = normalize_database_url(url)

        engine_kwargs: dict = {"echo": echo}
        if _is_memory_sqlite(self.url):
            # every connection to ":memory:" would otherwise see its own empty database
            engine_kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        elif _is_sqlite(self.url):
            Path(make_url(self.url).database).parent.mkdir(parents=True, exist_ok=True)
        else:
            engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

        self.engine = create_async_engine(self.url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        if _is_sqlite(self.url):
            event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragma)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            from fleet_registry.models import vehicle  # noqa: F401
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def close(self) -> None:
        await self.engine.dispose()


def _set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    # brand/model filters are case-sensitive substring matches
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session


@asynccontextmanager
async def storage_guard(session: AsyncSession, action: str) -> AsyncIterator[None]:
    """Translate storage faults raised inside the block into application errors.

    A uniqueness violation becomes ``ConflictError``; anything else the driver
    raises becomes ``StorageUnavailableError``.
    """
    try:
        yield
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Uniqueness violation while trying to %s: %s", action, exc.orig)
        raise ConflictError() from exc
    except (DBAPIError, PoolTimeoutError) as exc:
        logger.error("Storage failure while trying to %s: %s", action, exc)
        raise StorageUnavailableError() from exc
