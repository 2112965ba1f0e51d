from collections.abc import Generator
import logging
import threading
from typing import Optional

import duckdb
import pandas as pd

from load_bus_data import load_fleet

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Exception raised for database-related errors."""
    pass


class DatabaseConnector:
    """A class to connect to the DuckDB bus store and execute queries."""

    def __init__(self, db_path=":memory:"):
        """Initializes the DatabaseConnector.

        Args:
            db_path (str, optional): The path to the DuckDB database file.
                Defaults to ":memory:", which creates an in-memory database.
        """
        self.db_path = db_path
        self.conn = None
        self._lock = threading.RLock()

    def connect(self) -> duckdb.DuckDBPyConnection:
        """Connects to the DuckDB database and loads the fleet on first use.

        Returns:
            duckdb.DuckDBPyConnection: A connection object to the database.

        Raises:
            DatabaseError: If the connection fails.
        """
        with self._lock:
            if not self.conn:
                try:
                    self.conn = duckdb.connect(self.db_path)
                    load_fleet(self.conn)
                except Exception as e:
                    logger.error(f"Failed to connect to database at '{self.db_path}': {e}")
                    self.conn = None
                    raise DatabaseError(f"Database connection failed: {e}") from e
            return self.conn

    def execute(self, query, params=None) -> list:
        """Executes a SQL query and fetches all results.

        Args:
            query (str): The SQL query to execute.
            params (list, optional): A list of parameters to substitute into the query.
                Defaults to None.

        Returns:
            list: A list of tuples representing the query results.

        Raises:
            DatabaseError: If the query execution fails.
        """
        with self._lock:
            try:
                conn = self.connect()
                if params:
                    return conn.execute(query, params).fetchall()
                return conn.execute(query).fetchall()
            except Exception as e:
                if isinstance(e, DatabaseError):
                    raise
                logger.error(f"Database query execution failed: {e}")
                raise DatabaseError(f"Query execution failed: {e}") from e

    def execute_df(self, query, params=None) -> pd.DataFrame:
        """Executes a SQL query and returns the results as a Pandas DataFrame.

        Args:
            query (str): The SQL query to execute.
            params (list, optional): A list of parameters to substitute into the query.
                Defaults to None.

        Returns:
            pandas.DataFrame: A DataFrame containing the query results.

        Raises:
            DatabaseError: If the query execution fails.
        """
        with self._lock:
            try:
                conn = self.connect()
                if params:
                    return conn.execute(query, params).df()
                return conn.execute(query).df()
            except Exception as e:
                if isinstance(e, DatabaseError):
                    raise
                logger.error(f"Database query execution failed: {e}")
                raise DatabaseError(f"Query execution failed: {e}") from e

    def transaction(self):
        """Hold the connection lock for a group of statements.

        Usage:
            with db.transaction():
                db.execute(...)
                db.execute(...)
        """
        return self._lock

    def close(self) -> None:
        """Closes the database connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None


_database: Optional[DatabaseConnector] = None


def init_db(db_path: str = ":memory:") -> DatabaseConnector:
    """Create and connect the process-wide bus store, replacing any previous one."""
    global _database
    if _database is not None:
        _database.close()
    _database = DatabaseConnector(db_path)
    _database.connect()
    return _database


def close_db() -> None:
    global _database
    if _database is not None:
        _database.close()
        _database = None


def get_db() -> Generator[DatabaseConnector, None, None]:
    db = _database if _database is not None else init_db()
    yield db
