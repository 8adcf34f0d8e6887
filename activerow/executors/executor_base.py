##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Abstract base class for storage executors in ActiveRow.

This module defines `StorageExecutor`, the interface models use to reach a
database, and `StatementResult`, the outcome of a write statement.

A storage executor runs single-table statements described by a table name, a
list of columns, a row mapping and a filter mapping (see `activerow.executors.where`).
Write operations never raise on driver errors: they log the error and return a
`StatementResult` with `ok=False`, so models can report failed writes as False.

Usage:
    This base class is not meant to be instantiated directly. Instead, it should be
    subclassed by executor implementations such as `SQLiteExecutor` or `SQLAlchemyExecutor`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


LOG = logging.getLogger(__name__)

CURRENT_TIMESTAMP_SQL = "SELECT CURRENT_TIMESTAMP"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class StatementResult:
    """
    The outcome of an insert, update or delete statement.

    Attributes:
        ok: True if the driver executed the statement without error.
        affected: The number of rows affected.
        last_insert_id: The id generated by an insert, if any.
    """

    ok: bool
    affected: int = 0
    last_insert_id: Any = None


def normalize_timestamp(value: Any) -> str:
    """
    Convert a `CURRENT_TIMESTAMP` result into `YYYY-MM-DD HH:MM:SS` text.

    Drivers return either text or a datetime object depending on the engine.

    Args:
        value: The value returned by the database.

    Returns:
        The timestamp as text.
    """
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    if isinstance(value, (date, time)):
        return value.isoformat()
    text = str(value)
    # Some engines use ISO 8601 or append fractional seconds or an offset
    if len(text) >= 19 and text[10] in (" ", "T"):
        return f"{text[:10]} {text[11:19]}"
    return text


class StorageExecutor(ABC):
    """
    Abstract base class for a storage executor, which runs statements against
    one database connection.

    Attributes:
        executor_name (str): The name of the executor (e.g., "sqlite").

    Methods:
        get_name: Retrieve the name of the executor.
        get_version: Query the database for its version.
        get: Fetch the first row matching a filter.
        select: Fetch every row matching a filter.
        insert: Insert one row.
        update: Update the rows matching a filter.
        delete: Delete the rows matching a filter.
        query: Run a raw statement and return its rows.
        current_timestamp: Fetch the database's current timestamp.
        close: Release the underlying connection.
    """

    def __init__(self, executor_name: str):
        """
        Initialize the `StorageExecutor` instance.

        Args:
            executor_name: The name of the executor (e.g. "sqlite").
        """
        self.executor_name: str = executor_name

    def get_name(self) -> str:
        """
        Get the name of the executor.

        Returns:
            The name of the executor (e.g. sqlite).
        """
        return self.executor_name

    @abstractmethod
    def get_version(self) -> str:
        """
        Query the database for its version.

        Returns:
            A string representing the version of the database engine.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `get_version` method.")

    @abstractmethod
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
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `get` method.")

    @abstractmethod
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
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `select` method.")

    @abstractmethod
    def insert(self, table: str, row: Mapping, id_column: Optional[str] = None) -> StatementResult:
        """
        Insert one row into `table`.

        Args:
            table: The table to write.
            row: A mapping of columns to values.
            id_column: The column generated by the database, if any. Engines that
                cannot report a last inserted id use it to return the generated value.

        Returns:
            The outcome of the statement, with the generated id if any.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement an `insert` method.")

    @abstractmethod
    def update(self, table: str, row: Mapping, where: Mapping) -> StatementResult:
        """
        Update the rows of `table` matching `where`.

        Args:
            table: The table to write.
            row: A mapping of columns to new values.
            where: The filter selecting the rows to update.

        Returns:
            The outcome of the statement.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement an `update` method.")

    @abstractmethod
    def delete(self, table: str, where: Mapping) -> StatementResult:
        """
        Delete the rows of `table` matching `where`.

        Args:
            table: The table to write.
            where: The filter selecting the rows to delete. Must not be empty.

        Returns:
            The outcome of the statement.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `delete` method.")

    @abstractmethod
    def query(self, statement: str, params: Any = None) -> List[Tuple]:
        """
        Run a raw statement and return its rows.

        Args:
            statement: The SQL text to run.
            params: Parameters bound to the statement.

        Returns:
            The result rows as tuples.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `query` method.")

    @abstractmethod
    def close(self):
        """
        Release the underlying connection.
        """
        raise NotImplementedError("Subclasses of `StorageExecutor` must implement a `close` method.")

    def current_timestamp(self) -> str:
        """
        Fetch the current timestamp from the database.

        Using the database clock keeps every stamp written in one operation on the
        same instant and timezone.

        Returns:
            The timestamp formatted as `YYYY-MM-DD HH:MM:SS`.
        """
        rows = self.query(CURRENT_TIMESTAMP_SQL)
        return normalize_timestamp(rows[0][0])
