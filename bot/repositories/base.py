"""
Base repository class providing common database operations.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List
import sqlite3

import config

T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for all repositories.

    Provides common database connection handling and defines
    the interface that all repositories must implement.

    Repositories never swallow sqlite3 errors; the caller decides
    what a failure means.
    """

    _shared_connection: Optional[sqlite3.Connection] = None
    _shared_db_path: Optional[str] = None

    @classmethod
    def set_shared_connection(cls, conn: sqlite3.Connection, db_path: str):
        """Set a shared connection for all repositories (from Database singleton)."""
        cls._shared_connection = conn
        cls._shared_db_path = db_path

    @classmethod
    def clear_shared_connection(cls):
        cls._shared_connection = None
        cls._shared_db_path = None

    def __init__(self, db_path: Optional[str] = None, use_shared: bool = True):
        """
        Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database. If None, uses default.
            use_shared: If True and shared connection exists, use it.
        """
        self._use_shared = use_shared and BaseRepository._shared_connection is not None

        if db_path is None:
            if self._use_shared and BaseRepository._shared_db_path:
                db_path = BaseRepository._shared_db_path
            else:
                db_path = str(config.DATABASE_PATH)
        self._db_path = db_path

    @property
    def db_path(self) -> str:
        """Get the database path."""
        return self._db_path

    def _shared(self) -> Optional[sqlite3.Connection]:
        if self._use_shared:
            return BaseRepository._shared_connection
        return None

    def _get_connection(self) -> sqlite3.Connection:
        """
        Get a database connection.

        If shared connection is available and enabled, returns it.
        Otherwise creates a new connection.
        """
        shared = self._shared()
        if shared is not None:
            return shared
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        """
        Execute a query and return all results.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            List of Row objects
        """
        shared = self._shared()
        if shared is not None:
            return shared.execute(query, params).fetchall()

        conn = self._get_connection()
        try:
            return conn.execute(query, params).fetchall()
        finally:
            conn.close()

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """
        Execute a query and return the first result.

        Returns:
            Single Row or None
        """
        results = self._execute(query, params)
        return results[0] if results else None

    def _execute_write(self, query: str, params: tuple = ()) -> int:
        """
        Execute a write query (INSERT, UPDATE, DELETE) and commit.

        On failure the pending transaction is rolled back and the
        sqlite3 error is re-raised.

        Returns:
            Number of rows affected
        """
        shared = self._shared()
        conn = shared if shared is not None else self._get_connection()
        try:
            with conn:
                cursor = conn.execute(query, params)
                return cursor.rowcount
        finally:
            if shared is None:
                conn.close()

    # Abstract methods that subclasses must implement

    @abstractmethod
    def get_all(self, limit: int = 100) -> List[T]:
        """Get all entities, with optional limit."""
        pass

    @abstractmethod
    def _row_to_entity(self, row: sqlite3.Row) -> T:
        """Convert a database row to an entity object."""
        pass
