from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from . import models  # noqa: F401  registers tables on SQLModel.metadata


class Database:
    """Simple async database helper shared by the SQL repositories."""

    def __init__(self, database_url: str) -> None:
        connect_args = {}
        engine_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            # connections close with their session
            engine_args["poolclass"] = NullPool
        self.database_url = database_url
        self.engine = create_async_engine(
            database_url,
            echo=False,
            future=True,
            connect_args=connect_args,
            **engine_args,
        )
        self._initialized = False

    async def init_db(self) -> None:
        if self._initialized:
            return
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        self._initialized = True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        await self.init_db()
        async with AsyncSession(self.engine, expire_on_commit=False) as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
