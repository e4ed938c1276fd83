from __future__ import annotations

import contextlib
from typing import Any, Iterator, Optional

import psycopg
from psycopg_pool import ConnectionPool

from .config import ContactBookSettings, get_settings
from .errors import translate_db_errors
from .logging import get_logger

logger = get_logger("contactbook.db")


class Database:
    """Explicit handle on a psycopg connection pool.

    Each repository receives one of these at construction; nothing in the
    package keeps a module-level pool.
    """

    def __init__(self, settings: Optional[ContactBookSettings] = None, *, pool: Optional[ConnectionPool] = None) -> None:
        self.settings = settings or get_settings()
        self._pool = pool or ConnectionPool(
            self.settings.database_url,
            kwargs=self.settings.connection_kwargs(),
            min_size=self.settings.pool_min_size,
            max_size=self.settings.pool_max_size,
            timeout=self.settings.pool_timeout,
            max_idle=self.settings.pool_max_idle,
            open=False,
            name="contactbook",
        )

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    def open(self, wait: bool = False) -> None:
        self._pool.open(wait=wait)
        logger.info("db_pool_opened", min_size=self._pool.min_size, max_size=self._pool.max_size)

    def close(self) -> None:
        self._pool.close()
        logger.info("db_pool_closed")

    @contextlib.contextmanager
    def connection(self) -> Iterator[psycopg.Connection[Any]]:
        """Borrow one pooled connection for the duration of the block.

        The pool commits on a clean exit, rolls back when the block raises, and
        always takes the connection back. psycopg failures leave the block as
        contact-core errors.
        """
        with translate_db_errors():
            with self._pool.connection() as conn:
                yield conn

    @contextlib.contextmanager
    def transaction(self) -> Iterator[psycopg.Connection[Any]]:
        with self.connection() as conn:
            with conn.transaction():
                yield conn


__all__ = ["Database"]
