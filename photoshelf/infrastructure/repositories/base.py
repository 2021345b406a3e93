"""Base repository protocol and utilities.

This module defines the interface that all repositories must implement.
"""
import math
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Protocol


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""

    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...


@dataclass
class Page:
    """One page of a larger result set (0-based page numbers)."""

    content: list[Any]
    total_elements: int
    number: int
    size: int

    total_pages: int = field(init=False)
    first: bool = field(init=False)
    last: bool = field(init=False)
    number_of_elements: int = field(init=False)

    def __post_init__(self):
        self.total_pages = math.ceil(self.total_elements / self.size) if self.size else 0
        self.first = self.number == 0
        self.last = self.number >= self.total_pages - 1
        self.number_of_elements = len(self.content)


class Repository:
    """Base repository class.

    All repositories should inherit from this class.

    Example:
        class UserRepository(Repository):
            def get_by_id(self, user_id: int) -> dict | None:
                return self._fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
    """

    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.

        Args:
            connection: Database connection (photoshelf.database.Connection or compatible)
        """
        self._conn = connection

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.

        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)

        Returns:
            sqlite3.Cursor with results
        """
        return self._conn.execute(sql, parameters)

    def _commit(self) -> None:
        """Commit current transaction (deferred inside an atomic block)."""
        self._conn.commit()

    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary.

        Args:
            row: Database row or None

        Returns:
            Dictionary representation or None
        """
        return dict(row) if row else None

    def _fetchone(self, sql: str, parameters: tuple = ()) -> dict | None:
        """Fetch single row and return as dict."""
        return self._row_to_dict(self._execute(sql, parameters).fetchone())

    def _fetchall(self, sql: str, parameters: tuple = ()) -> list[dict]:
        """Fetch all rows and return as list of dicts."""
        return [dict(row) for row in self._execute(sql, parameters).fetchall()]

    @staticmethod
    def _placeholders(values: list) -> str:
        """Build ``?, ?, ?`` for an IN clause."""
        return ", ".join("?" for _ in values)
