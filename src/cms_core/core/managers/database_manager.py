# src/cms_core/core/managers/database_manager.py
import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union

from cms_core.core.managers.config_manager import config_manager
from cms_core.core.utils.path_utils import PathUtils
from cms_core.database_schema import DEFAULT_SCHEMA_SCRIPT

logger = logging.getLogger(__name__)

# Thread-local storage to ensure SQLite connections are not shared across threads
thread_local_storage = threading.local()


class DatabaseManager:
    """
    A 'dumb' Database Manager.

    Responsibility:
        - Handles SQLite connection lifecycles (opening, closing, caching per thread).
        - Executes raw SQL queries and scripts.
        - Initializes the CMS schema.

    Constraints:
        - It does NOT contain business logic; the data managers build on it.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Args:
            db_path: SQLite file to use. Defaults to 'database.path' from the
                     settings, or '<cache root>/cms.db' when that is empty.
        """
        if db_path is None:
            db_path = PathUtils.get_database_path(config_manager.get_nested("database.path", ""))
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._open_connections: List[sqlite3.Connection] = []
        self._conn_lock = threading.Lock()
        logger.debug("DatabaseManager initialized at: %s", self.db_path)

    # --- CONNECTION METHODS ---

    def get_connection(self) -> sqlite3.Connection:
        """Retrieves (or opens) this thread's connection to the database file."""
        key = str(self.db_path)

        if not hasattr(thread_local_storage, 'connections'):
            thread_local_storage.connections = {}

        cached_conn = thread_local_storage.connections.get(key)
        if cached_conn is not None:
            try:
                cached_conn.execute("SELECT 1;")
                return cached_conn
            except sqlite3.Error:
                thread_local_storage.connections.pop(key, None)

        try:
            conn = sqlite3.connect(key, isolation_level=None, check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA foreign_keys = ON;")

            thread_local_storage.connections[key] = conn
            with self._conn_lock:
                self._open_connections.append(conn)
            return conn
        except sqlite3.Error as e:
            logger.error("Fatal error opening DB %s: %s", key, e, exc_info=True)
            raise

    def close(self) -> None:
        """Closes all connections opened by this manager and truncates the WAL file."""
        with self._conn_lock:
            connections, self._open_connections = self._open_connections, []
        for conn in connections:
            try:
                conn.execute("PRAGMA wal_checkpoint(TRUNCATE);")
                conn.close()
            except sqlite3.Error as e:
                logger.debug("Could not checkpoint/close connection: %s", e)

        if hasattr(thread_local_storage, 'connections'):
            thread_local_storage.connections.pop(str(self.db_path), None)
        logger.debug("Connections for %s closed.", self.db_path)

    # --- EXECUTION METHODS ---

    def execute_query(self, query: str, params: tuple = ()) -> int:
        """Executes a statement that returns no rows. Returns the affected row count."""
        conn = self.get_connection()
        try:
            with conn:
                return conn.execute(query, params).rowcount
        except sqlite3.Error as e:
            logger.error("Query failed: %s | Query: %s", e, query)
            raise

    def execute_insert(self, query: str, params: tuple = ()) -> int:
        """Executes an INSERT statement and returns the `lastrowid`."""
        conn = self.get_connection()
        try:
            with conn:
                return conn.execute(query, params).lastrowid
        except sqlite3.Error as e:
            logger.error("Insert failed: %s", e)
            raise

    def execute_script(self, script: str) -> None:
        """Executes a raw SQL script (multiple statements)."""
        conn = self.get_connection()
        try:
            with conn:
                conn.executescript(script)
        except sqlite3.Error as e:
            logger.error("Script execution failed: %s", e)
            raise

    # --- READ METHODS ---

    def fetch_all(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        """Executes a query and returns all rows (sqlite3.Row, addressable by column name)."""
        conn = self.get_connection()
        try:
            cursor = conn.execute(query, params)
            cursor.row_factory = sqlite3.Row
            return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error("Fetch failed: %s", e)
            return []

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Executes a query and returns a single row, or None."""
        conn = self.get_connection()
        try:
            cursor = conn.execute(query, params)
            cursor.row_factory = sqlite3.Row
            return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error("Fetch failed: %s", e)
            return None

    # --- WRITE METHODS ---

    def save_batch(self, sql_query: str, data_tuples: List[tuple]) -> None:
        """Executes a batch write using `executemany`."""
        if not data_tuples:
            return
        conn = self.get_connection()
        try:
            with conn:
                conn.executemany(sql_query, data_tuples)
        except sqlite3.Error as e:
            logger.error("Batch execution failed: %s", e)
            logger.debug("Sample tuple: %s", data_tuples[0])
            raise

    def clear_tables(self, table_names: List[str]) -> None:
        """Deletes all rows from the specified tables."""
        if not table_names:
            return
        conn = self.get_connection()
        try:
            with conn:
                for table in table_names:
                    conn.execute(f"DELETE FROM {table}")
            logger.debug("Cleared tables: %s", ", ".join(table_names))
        except sqlite3.Error as e:
            logger.error("Failed to clear tables %s: %s", table_names, e)
            raise

    # --- SCHEMA METHODS ---

    def init_schema(self) -> None:
        """Creates the CMS tables if they do not exist yet."""
        self.execute_script(DEFAULT_SCHEMA_SCRIPT)
