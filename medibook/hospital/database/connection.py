"""Database connection manager for SQLite."""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from medibook import config
from medibook.errors import StoreError

from .schema import SCHEMA

logger = logging.getLogger(__name__)


class Database:
    """Handle to the hospital SQLite store.

    One instance is created at startup and passed to every repository and
    service. Connections are opened per unit of work and always closed.
    """

    def __init__(self, path: str | Path | None = None, busy_timeout: float | None = None):
        self.path = Path(path) if path else config.DB_PATH
        self.busy_timeout = config.DB_BUSY_TIMEOUT if busy_timeout is None else busy_timeout

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory enabled.

        The connection is in autocommit mode; multi-statement writes go
        through transaction().
        """
        conn = sqlite3.connect(self.path, timeout=self.busy_timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init(self) -> None:
        """Initialize the database with schema."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)
        logger.info("Database ready at %s", self.path)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection for reads and single-statement writes."""
        conn = None
        try:
            conn = self.get_connection()
            yield conn
        except sqlite3.Error as exc:
            logger.exception("Database operation failed")
            raise StoreError("Database error") from exc
        finally:
            if conn is not None:
                conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside BEGIN IMMEDIATE ... COMMIT.

        The write lock is taken up front, so concurrent transactions are
        serialized. Any exception rolls the whole transaction back.
        """
        conn = None
        try:
            conn = self.get_connection()
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            self._rollback(conn)
            logger.exception("Database transaction failed")
            raise StoreError("Database error") from exc
        except BaseException:
            self._rollback(conn)
            raise
        finally:
            if conn is not None:
                conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection | None) -> None:
        if conn is not None and conn.in_transaction:
            conn.execute("ROLLBACK")


class Repository:
    """Base for repositories bound to a Database handle."""

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def _use(self, conn: sqlite3.Connection | None) -> Iterator[sqlite3.Connection]:
        """Reuse the caller's connection (inside a transaction) or open one."""
        if conn is not None:
            yield conn
        else:
            with self.db.connect() as own:
                yield own
