# database.py

import sqlite3
from contextlib import contextmanager
from sqlite3 import connect, Connection
from typing import Optional

from lesson_api.errors import StorageError
from lesson_api.logger import log_error, log_info


class Database:
    """
    Handle to the sqlite database file shared by the stores.

    Every operation opens its own connection, so concurrent requests served
    from different threads (or processes) never share transaction state.
    Store methods accept an open connection to join a caller's transaction.
    """

    def __init__(self, db_file: str, timeout: float = 5.0):
        self.db_file = db_file
        self.timeout = timeout

    def create_connection(self) -> Connection:
        """ Create a connection to the SQLite database file in autocommit mode. """
        try:
            conn = connect(self.db_file, timeout=self.timeout, isolation_level=None, check_same_thread=False)
            # LIKE only folds ASCII letters; casefold() covers the rest of Unicode
            conn.create_function("casefold", 1, str.casefold, deterministic=True)
        except sqlite3.Error as e:
            log_error(f"Error connecting to database {self.db_file}: {e}")
            raise StorageError(f"Error connecting to database: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def read(self, conn: Optional[Connection] = None):
        """ Yield a connection for reads; statements run in autocommit mode. """
        if conn is not None:
            yield conn
            return
        conn = self.create_connection()
        try:
            yield conn
        except sqlite3.Error as e:
            log_error(f"Database read failed: {e}")
            raise StorageError(f"Database read failed: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self, conn: Optional[Connection] = None):
        """
        Yield a connection inside a BEGIN IMMEDIATE transaction.

        The write lock is taken up front, so statements inside see the latest
        committed state. Commits on success, rolls back on any error.
        Given an open connection, joins its transaction instead; the owner of
        that transaction commits or rolls back.
        """
        if conn is not None:
            yield conn
            return
        conn = self.create_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                conn.execute("ROLLBACK")
                raise
        except sqlite3.Error as e:
            log_error(f"Database transaction failed: {e}")
            raise StorageError(f"Database transaction failed: {e}") from e
        finally:
            conn.close()


# Create tables if they don't exist
def create_tables(db: Database):
    """ Create tables for lessons, orders, and the order ledger. """
    with db.read() as conn:
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS lessons (
                id TEXT PRIMARY KEY NOT NULL,
                title TEXT NOT NULL,
                location TEXT NOT NULL,
                price REAL NOT NULL CHECK (price >= 0),
                available_inventory INTEGER NOT NULL CHECK (available_inventory >= 0),
                description TEXT NOT NULL DEFAULT '',
                continent TEXT NOT NULL DEFAULT '',
                image TEXT NOT NULL DEFAULT ''
            )
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS orders (
                order_id TEXT PRIMARY KEY NOT NULL UNIQUE,
                name TEXT NOT NULL,
                phone_number TEXT NOT NULL,
                address TEXT NOT NULL,
                city TEXT NOT NULL,
                state TEXT NOT NULL,
                zip TEXT NOT NULL,
                lesson_ids TEXT NOT NULL,
                lesson_names TEXT NOT NULL,
                number_of_spaces INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )

        # one row per reserved order line
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ledger (
                ledger_id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id TEXT NOT NULL REFERENCES orders(order_id),
                lesson_id TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
    log_info(f"Tables ready in {db.db_file}.")
