from __future__ import annotations
from typing import Dict, Optional, Protocol
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, async_sessionmaker
from .errors import StorageFault


class PersistenceAdapter(Protocol):
    """Durable key-value byte store."""

    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or None when the key is absent."""

    async def set(self, key: str, value: bytes) -> None:
        """Store bytes under key; raise StorageFault when the write fails."""


class MemoryStore:
    """Process-local adapter, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.data[key] = value


class SqliteStore:
    def __init__(self, db_url: str):
        self.engine: AsyncEngine = create_async_engine(db_url, future=True)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(text("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """))

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def get(self, key: str) -> Optional[bytes]:
        try:
            async with self.session_factory() as s:
                res = await s.execute(text("SELECT value FROM kv WHERE key=:key"), {"key": key})
                row = res.first()
        except SQLAlchemyError as e:
            raise StorageFault(f"could not read {key!r}") from e
        if not row:
            return None
        value = row[0]
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    async def set(self, key: str, value: bytes) -> None:
        try:
            async with self.session_factory() as s:
                await s.execute(
                    text("INSERT OR REPLACE INTO kv (key, value) VALUES (:key, :value)"),
                    {"key": key, "value": value},
                )
                await s.commit()
        except SQLAlchemyError as e:
            raise StorageFault(f"could not write {key!r}") from e
