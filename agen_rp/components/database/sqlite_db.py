import sqlite3
from typing import Any

from agen_rp.components.database.db_interface import DBInterface


class SqliteDB(DBInterface):
    """SQLite connection used as the local key-value store."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.connection: sqlite3.Connection | None = None

    def connect(self) -> None:
        if self.connection is None:
            self.connection = sqlite3.connect(self.db_path)
            self.connection.row_factory = sqlite3.Row

    def close(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None

    def _require_connection(self) -> sqlite3.Connection:
        if self.connection is None:
            raise ConnectionError("Database not connected")
        return self.connection

    def execute(self, query: str, params: tuple | None = None) -> None:
        """
        Execute a statement with no return value.
        """
        self._require_connection().execute(query, params or ())

    def execute_and_fetchone(
        self, query: str, params: tuple | None = None
    ) -> dict[str, Any] | None:
        """
        Execute a query and fetch a single row as a dictionary.
        """
        row = self._require_connection().execute(query, params or ()).fetchone()
        if row:
            return dict(row)
        return None

    def commit(self) -> None:
        self._require_connection().commit()
