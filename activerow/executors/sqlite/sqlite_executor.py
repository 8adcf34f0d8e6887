##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
SQLite implementation of the `StorageExecutor` interface.

`SQLiteExecutor` keeps one `sqlite3` connection open for its whole lifetime, so
in-memory databases survive between statements and `lastrowid` is reliable.
SQL text is built from the normalized filter terms of `activerow.executors.where`.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from activerow.exceptions import InvalidArgumentError
from activerow.executors.executor_base import StatementResult, StorageExecutor
from activerow.executors.sqlite.sqlite_connection import MEMORY_DATABASE, SQLiteConnection
from activerow.executors.where import build_where_clause, quote_identifier


LOG = logging.getLogger(__name__)


class SQLiteExecutor(StorageExecutor):
    """
    A SQLite-based implementation of the `StorageExecutor` interface.

    Attributes:
        executor_name (str): Always "sqlite".
        database_name (str): The database file path, or `:memory:`.
        conn (sqlite3.Connection): The open connection.

    Methods:
        get_version: Query SQLite for the current version.
        get: Fetch the first row matching a filter.
        select: Fetch every row matching a filter.
        insert: Insert one row.
        update: Update the rows matching a filter.
        delete: Delete the rows matching a filter.
        query: Run a raw statement and return its rows.
        close: Close the connection.
    """

    def __init__(self, database_name: str = MEMORY_DATABASE, **settings: Any):
        """
        Initialize the executor and open its connection.

        Args:
            database_name: The database file path, or `:memory:`.
            **settings: Other connection settings (server, credentials, ...). SQLite
                does not use them.
        """
        super().__init__("sqlite")
        self.database_name: str = database_name
        if settings:
            LOG.debug(f"Ignoring settings not used by SQLite: {', '.join(sorted(settings))}")
        self._connection = SQLiteConnection(database_name)
        self.conn: sqlite3.Connection = self._connection.open()

    def get_version(self) -> str:
        """
        Query SQLite for the current version.

        Returns:
            The SQLite version string.
        """
        return self.conn.execute("SELECT sqlite_version()").fetchone()[0]

    def _select_sql(self, table: str, columns: Sequence[str], where: Optional[Mapping]) -> Tuple[str, List[Any]]:
        columns_str = ", ".join(quote_identifier(column) for column in columns) if columns else "*"
        where_clause, params = build_where_clause(where)
        return f"SELECT {columns_str} FROM {quote_identifier(table)} {where_clause}".rstrip(), params

    def get(self, table: str, columns: Sequence[str], where: Optional[Mapping] = None) -> Optional[Dict[str, Any]]:
        """
        Fetch the first row of `table` matching `where`.

        Args:
            table: The table to read.
            columns: The columns to fetch.
            where: The filter to apply.

        Returns:
            The row as a dictionary, or None if nothing matched.
        """
        sql, params = self._select_sql(table, columns, where)
        LOG.debug(f"SQLite query: {sql} LIMIT 1; params: {params}")
        row = self.conn.execute(f"{sql} LIMIT 1", params).fetchone()
        return dict(row) if row is not None else None

    def select(self, table: str, columns: Sequence[str], where: Optional[Mapping] = None) -> List[Dict[str, Any]]:
        """
        Fetch every row of `table` matching `where`.

        Args:
            table: The table to read.
            columns: The columns to fetch.
            where: The filter to apply. None selects every row.

        Returns:
            A list of rows as dictionaries.
        """
        sql, params = self._select_sql(table, columns, where)
        LOG.debug(f"SQLite query: {sql}; params: {params}")
        return [dict(row) for row in self.conn.execute(sql, params).fetchall()]

    def _execute_write(self, sql: str, params: List[Any]) -> StatementResult:
        LOG.debug(f"SQLite statement: {sql}; params: {params}")
        try:
            cursor = self.conn.execute(sql, params)
        except sqlite3.Error as exc:
            LOG.error(f"SQLite statement failed: {exc}")
            return StatementResult(ok=False)
        return StatementResult(ok=True, affected=cursor.rowcount, last_insert_id=cursor.lastrowid)

    def insert(self, table: str, row: Mapping, id_column: Optional[str] = None) -> StatementResult:
        """
        Insert one row into `table`.

        Args:
            table: The table to write.
            row: A mapping of columns to values. An empty mapping inserts default values.
            id_column: Unused, SQLite always reports the last inserted rowid.

        Returns:
            The outcome of the statement, with the generated rowid.
        """
        if not row:
            return self._execute_write(f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES", [])

        columns_str = ", ".join(quote_identifier(column) for column in row)
        placeholders_str = ", ".join("?" for _ in row)
        sql = f"INSERT INTO {quote_identifier(table)} ({columns_str}) VALUES ({placeholders_str})"
        return self._execute_write(sql, list(row.values()))

    def update(self, table: str, row: Mapping, where: Mapping) -> StatementResult:
        """
        Update the rows of `table` matching `where`.

        Args:
            table: The table to write.
            row: A mapping of columns to new values. An empty mapping is a no-op.
            where: The filter selecting the rows to update.

        Returns:
            The outcome of the statement.
        """
        if not row:
            return StatementResult(ok=True, affected=0)

        set_str = ", ".join(f"{quote_identifier(column)} = ?" for column in row)
        where_clause, where_params = build_where_clause(where)
        sql = f"UPDATE {quote_identifier(table)} SET {set_str} {where_clause}".rstrip()
        return self._execute_write(sql, list(row.values()) + where_params)

    def delete(self, table: str, where: Mapping) -> StatementResult:
        """
        Delete the rows of `table` matching `where`.

        Args:
            table: The table to write.
            where: The filter selecting the rows to delete.

        Returns:
            The outcome of the statement.

        Raises:
            InvalidArgumentError: If `where` is empty.
        """
        if not where:
            raise InvalidArgumentError(f"Refusing to delete from '{table}' without a filter")

        where_clause, params = build_where_clause(where)
        return self._execute_write(f"DELETE FROM {quote_identifier(table)} {where_clause}", params)

    def query(self, statement: str, params: Any = None) -> List[Tuple]:
        """
        Run a raw statement and return its rows.

        Args:
            statement: The SQL text to run.
            params: A sequence or mapping of parameters.

        Returns:
            The result rows as tuples.
        """
        LOG.debug(f"SQLite raw query: {statement}")
        cursor = self.conn.execute(statement, params if params is not None else ())
        return [tuple(row) for row in cursor.fetchall()]

    def close(self):
        """
        Close the connection.
        """
        self._connection.close()
