"""Database handle

Owns the async engine and session factory. Constructed once at process start
(see create_app) and disposed at shutdown.

On SQLite every transaction starts with BEGIN IMMEDIATE, which takes the
database write lock up front. SQLite has no SELECT ... FOR UPDATE, so this
is what serializes concurrent balance and payment mutations there.
"""

import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Register every table on SQLModel.metadata
import src.domain  # noqa: F401

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # Hand transaction control to the begin listener below
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    # ON DELETE CASCADE is ignored by SQLite unless enabled per connection
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    def __init__(self, db_uri: str, echo: bool = False, **engine_kwargs):
        self.db_uri = db_uri
        if db_uri.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS})
        self.engine = create_async_engine(db_uri, echo=echo, future=True, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _configure_sqlite_connection)
            event.listen(self.engine.sync_engine, "begin", _begin_immediate)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema ready")

    async def drop_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database engine disposed")
