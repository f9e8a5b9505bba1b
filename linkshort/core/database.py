"""Link store module for the link shortener service.

This module defines the ``LinkStore`` contract and the in-memory and
SQLite implementations. The PostgreSQL implementation lives in
``postgres.py``.
"""

import asyncio
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Awaitable, Optional, TypeVar

from fastapi import Request
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .exceptions import StoreError

T = TypeVar("T")

DEFAULT_WRITE_TIMEOUT = 1.0
DEFAULT_READ_TIMEOUT = 0.2

LINKS_SCHEMA = """
CREATE TABLE IF NOT EXISTS links (
    short TEXT PRIMARY KEY,
    original TEXT NOT NULL
)
"""


class LinkStore(ABC):
    """Abstract base class for short code to URL persistence.

    Every operation is bounded by a deadline: ``write_timeout`` for inserts
    and ``read_timeout`` for lookups. A deadline that elapses is reported
    as a ``StoreError``. Each operation runs inside a span of the injected
    tracer; without one, spans go to a no-op tracer.
    """

    def __init__(
        self,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        tracer: Optional[trace.Tracer] = None,
    ):
        self.write_timeout = write_timeout
        self.read_timeout = read_timeout
        self.logger = logger or logging.getLogger(__name__)
        self.tracer = tracer or trace.NoOpTracer()

    async def add_link(self, short: str, original: str) -> None:
        """Insert a new link.

        Args:
            short: The short code, unique per stored link.
            original: The original URL.

        Raises:
            StoreError: On timeout, duplicate short code or connectivity failure.
        """
        with self.tracer.start_as_current_span(
            "add_link",
            attributes={"link.short": short},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                await self._add_link(short, original)
            except StoreError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, "error adding link"))
                raise

    async def get_original(self, short: str) -> Optional[str]:
        """Look up the original URL for a short code.

        Args:
            short: The short code to look up.

        Returns:
            The original URL, or None when no link matches.

        Raises:
            StoreError: On timeout or connectivity failure.
        """
        with self.tracer.start_as_current_span(
            "get_original",
            attributes={"link.short": short},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                original = await self._get_original(short)
            except StoreError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, "error getting original"))
                raise
            span.set_attribute("link.found", original is not None)
            return original

    @abstractmethod
    async def _add_link(self, short: str, original: str) -> None:
        """Backend insert, raising ``StoreError`` on failure."""

    @abstractmethod
    async def _get_original(self, short: str) -> Optional[str]:
        """Backend lookup, returning None when no row matches."""

    async def init_db(self) -> None:
        """Create the links table if the backend needs one."""

    async def close(self) -> None:
        """Release any connections held by the store."""

    async def _with_deadline(self, operation: str, aw: Awaitable[T], timeout: float) -> T:
        try:
            return await asyncio.wait_for(aw, timeout)
        except asyncio.TimeoutError as e:
            raise StoreError(f"{operation} timed out after {timeout}s", e) from e


class MemoryLinkStore(LinkStore):
    """Dict-backed store for tests and local runs."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._links: dict[str, str] = {}

    async def _add_link(self, short: str, original: str) -> None:
        if short in self._links:
            raise StoreError(f"short code {short!r} already exists")
        self._links[short] = original

    async def _get_original(self, short: str) -> Optional[str]:
        return self._links.get(short)


class SQLiteLinkStore(LinkStore):
    """SQLite-backed store.

    Queries run on a worker thread so the event loop is never blocked. A
    single connection is shared and guarded by a lock.

    A deadline abandons the worker thread rather than stopping it: an insert
    reported as timed out may still commit afterwards. The connection's busy
    timeout is set to the write deadline so a worker waiting on a database
    lock gives up on its own.
    """

    def __init__(self, db_path: str = ":memory:", **kwargs):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file. Use ":memory:" for
                an in-memory database.
        """
        super().__init__(**kwargs)
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                timeout=self.write_timeout,
                check_same_thread=False,
            )
        return self._connection

    def _execute(self, query: str, params: tuple = (), fetch: bool = False) -> Optional[list]:
        with self._lock:
            conn = self._get_connection()
            try:
                cursor = conn.execute(query, params)
                if fetch:
                    return cursor.fetchall()
                conn.commit()
                return None
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(str(e), e) from e

    async def init_db(self) -> None:
        await asyncio.to_thread(self._execute, LINKS_SCHEMA)
        self.logger.info("Links table ready")

    async def _add_link(self, short: str, original: str) -> None:
        query = "INSERT INTO links (short, original) VALUES (?, ?)"
        await self._with_deadline(
            "add_link",
            asyncio.to_thread(self._execute, query, (short, original)),
            self.write_timeout,
        )
        self.logger.debug(f"Stored link {short}")

    async def _get_original(self, short: str) -> Optional[str]:
        query = "SELECT original FROM links WHERE short = ?"
        rows = await self._with_deadline(
            "get_original",
            asyncio.to_thread(self._execute, query, (short,), True),
            self.read_timeout,
        )
        return rows[0][0] if rows else None

    async def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None


def get_store(request: Request) -> LinkStore:
    """Get the application's link store for dependency injection."""
    return request.app.state.store
