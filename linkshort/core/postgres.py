"""PostgreSQL implementation of the link store."""

import asyncio
from typing import Optional

import asyncpg

from .database import LINKS_SCHEMA, LinkStore
from .exceptions import StoreError


class PostgresLinkStore(LinkStore):
    """asyncpg-backed store for the ``links`` table."""

    def __init__(self, dsn: str, pool_max_size: int = 10, **kwargs):
        """Initialize the store.

        Args:
            dsn: PostgreSQL connection string.
            pool_max_size: Maximum size of the connection pool.
        """
        super().__init__(**kwargs)
        self.dsn = dsn
        self.pool_max_size = pool_max_size
        self._pool: Optional[asyncpg.Pool] = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            async with self._pool_lock:
                if self._pool is None:
                    self.logger.debug("Creating postgres connection pool")
                    self._pool = await asyncpg.create_pool(
                        dsn=self.dsn,
                        min_size=1,
                        max_size=self.pool_max_size,
                    )
                    self.logger.info("Connected to postgres store")
        return self._pool

    async def init_db(self) -> None:
        try:
            pool = await self._get_pool()
            await pool.execute(LINKS_SCHEMA)
        except (asyncpg.PostgresError, OSError) as e:
            raise StoreError(f"cannot create links table: {e}", e) from e
        self.logger.info("Links table ready")

    async def _insert(self, short: str, original: str) -> None:
        pool = await self._get_pool()
        await pool.execute(
            "INSERT INTO links (short, original) VALUES ($1, $2)",
            short,
            original,
            timeout=self.write_timeout,
        )

    async def _select(self, short: str) -> Optional[str]:
        pool = await self._get_pool()
        return await pool.fetchval(
            "SELECT original FROM links WHERE short = $1",
            short,
            timeout=self.read_timeout,
        )

    async def _add_link(self, short: str, original: str) -> None:
        try:
            await self._with_deadline("add_link", self._insert(short, original), self.write_timeout)
        except asyncpg.UniqueViolationError as e:
            raise StoreError(f"short code {short!r} already exists", e) from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise StoreError(f"error adding link: {e}", e) from e

    async def _get_original(self, short: str) -> Optional[str]:
        try:
            return await self._with_deadline("get_original", self._select(short), self.read_timeout)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise StoreError(f"error getting original: {e}", e) from e

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
